from src.engagement.service import EngagementService

def get_engagement_service() -> EngagementService:
    return EngagementService()
