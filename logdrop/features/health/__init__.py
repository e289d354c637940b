from .routes_health import router

__all__ = ['router']
