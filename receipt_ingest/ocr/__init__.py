from receipt_ingest.ocr.base import BaseOcrDriver
from receipt_ingest.ocr.driver import ChatOcrDriver
from receipt_ingest.ocr.factory import OcrDriverFactory
from receipt_ingest.ocr.models import ExtractedFields

__all__ = ["BaseOcrDriver", "ChatOcrDriver", "ExtractedFields", "OcrDriverFactory"]
