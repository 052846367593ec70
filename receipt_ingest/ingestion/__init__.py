from receipt_ingest.ingestion.models import SessionSnapshot
from receipt_ingest.ingestion.session import IngestionSession, build_session

__all__ = ["IngestionSession", "SessionSnapshot", "build_session"]
