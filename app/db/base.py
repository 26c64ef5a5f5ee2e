# app/db/base.py
# Import all the models, so that Base has them before being
# imported by Alembic
from app.db.base_class import Base
from app.schemas.user import User
from app.schemas.game_config import GameConfig
from app.schemas.game_session import GameSession
