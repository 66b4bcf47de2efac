"""
Services module for business logic.

- roster_service, match_service, box_score_service: local-league mutations
- ranking_service: rankings, reports and dashboard
- sync: NBA import from balldontlie
- core: cross-cutting helpers (circuit breaker)
"""
