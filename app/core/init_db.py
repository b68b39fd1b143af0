from loguru import logger
from app.core.db import engine, Base

# Import all models so SQLAlchemy registers them
from app.models.user import User
from app.models.location import LocationFix
from app.models.block import Block
from app.modules.conversations.models import Conversation, ConversationParticipant, Message

def init_db():
    logger.info("Creating database tables")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
