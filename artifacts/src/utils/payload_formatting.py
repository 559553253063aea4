"""Helper functions to turn Qdrant records into artifact documents for the frontend."""

from qdrant_client import models

from artifacts.src.constants.artifacts import LIKE_TOKENS_FIELD


def format_record(record: models.Record) -> dict:
    """
    Make a Qdrant record ready for the frontend.
    The point id is exposed as `_id`, the payload fields are kept as stored
    except the internal like tokens.
    """
    payload = record.payload or {}
    return {
        "_id": str(record.id),
        **{key: value for key, value in payload.items() if key != LIKE_TOKENS_FIELD},
    }


def format_records(records: list[models.Record]) -> list[dict]:
    return [format_record(record) for record in records]
