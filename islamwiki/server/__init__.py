"""
IslamWiki ASGI server.

``islamwiki.server.main.create_app`` builds the FastAPI application that
hosts the wiki router.
"""
