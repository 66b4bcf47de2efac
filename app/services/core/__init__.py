"""
Core services shared by the rest of the application.

- circuit_breaker: pybreaker breakers guarding external API calls
"""
