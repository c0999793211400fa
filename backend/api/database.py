from sqlalchemy import create_engine, Column, Integer, String, DateTime, Text
from sqlalchemy.orm import declarative_base, sessionmaker
from datetime import datetime, timezone


def utc_now():
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)

Base = declarative_base()


class Snapshot(Base):
    """Last successful extraction for a site. Replaced wholesale on each save."""
    __tablename__ = 'snapshots'

    site_key = Column(String, primary_key=True)  # aliexpress, amazon
    listings = Column(Text, nullable=False, default='[]')  # JSON array of {title, raw_price, image_url}
    listing_count = Column(Integer, nullable=False, default=0)
    saved_at = Column(DateTime, default=utc_now, onupdate=utc_now)


# Database setup - import settings for database URL
from api.config import settings

# Configure engine with connection pooling for better performance
engine = create_engine(
    settings.database_url,
    echo=False,
    pool_size=5,           # Number of connections to keep in pool
    max_overflow=10,       # Additional connections allowed beyond pool_size
    pool_pre_ping=True,    # Verify connections before use (handles stale connections)
    pool_recycle=3600,     # Recycle connections after 1 hour
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def init_db():
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)
