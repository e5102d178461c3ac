"""
Core services shared by the IslamWiki application.

Contains the service container, exception types, logging configuration,
the database layer, configuration management and session handling.
"""
