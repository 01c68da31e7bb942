"""
FastAPI Todo Backend package.

Build the application with ``todo_api.main.create_app`` or run it with
``python -m todo_api.server``.
"""
