from __future__ import annotations

import logging
from decimal import Decimal
from functools import wraps
from typing import Optional

from flask import jsonify, request

from ..core.exceptions import ConcurrentUpdateError, NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def money(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else f"{value:.2f}"


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def api_view(view):
    """Translate service exceptions into JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except ValidationError as e:
            return json_error(str(e), 400)
        except ConcurrentUpdateError as e:
            return json_error(str(e), 409)
        except StorageError:
            logger.exception("Storage failure in %s", view.__name__)
            return json_error("Storage unavailable", 503)
        except Exception:
            logger.exception("Unexpected error in %s", view.__name__)
            return json_error("Internal error", 500)

    return wrapper
