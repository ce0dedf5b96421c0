"""
api package: FastAPI app and routers.
"""
