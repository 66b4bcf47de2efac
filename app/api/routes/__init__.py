"""
API routes, all mounted under ``/api/v1``:

- teams, players: roster CRUD
- matches, stats: match lifecycle and box-score entry
- rankings, reports, dashboard: read-side statistics
- sync: manual NBA import triggers
"""
