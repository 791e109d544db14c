from src.notifications.connection_manager import ConnectionManager
from src.notifications.service import NotificationService

# Global connection manager instance
_connection_manager = None

def get_connection_manager() -> ConnectionManager:
    """Get the global connection manager instance"""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager()
    return _connection_manager

def get_notification_service() -> NotificationService:
    """Get NotificationService bound to the global connection manager"""
    return NotificationService(get_connection_manager())
