from .routes_logs import router

__all__ = ['router']
