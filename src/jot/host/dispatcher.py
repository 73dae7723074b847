"""Request dispatcher - routes typed requests to thread store operations."""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from jot.core.config import HOST_VERSION
from jot.core.errors import ErrorCode, JotError
from jot.core.store import ThreadStore
from jot.core.types import (
    AppendCommentParams,
    DeleteCommentParams,
    Request,
    Response,
    SetConfigParams,
    UrlParams,
)

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any]], Any]


def _describe_validation_error(e: ValidationError) -> str:
    first = e.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "request"
    return f"{field}: {first.get('msg', 'invalid value')}"


class Dispatcher:
    """Maps request types to handlers and wraps results in response envelopes.

    Handlers return the ``data`` payload or raise. JotError becomes its code,
    bad parameters become INVALID_INPUT, anything else INTERNAL_ERROR.
    """

    def __init__(self, store: ThreadStore):
        """
        Initialize dispatcher.

        Args:
            store: Thread store the handlers operate on
        """
        self.store = store
        self.handlers: dict[str, Handler] = {
            "ping": self.handle_ping,
            "getConfig": self.handle_get_config,
            "setConfig": self.handle_set_config,
            "hasComments": self.handle_has_comments,
            "getThread": self.handle_get_thread,
            "getAllThreads": self.handle_get_all_threads,
            "appendComment": self.handle_append_comment,
            "deleteComment": self.handle_delete_comment,
            "deleteThread": self.handle_delete_thread,
        }

    def dispatch(self, message: dict[str, Any]) -> Response:
        """
        Handle one decoded request.

        Args:
            message: Request envelope {id, type, ...params}

        Returns:
            Response carrying the request's id
        """
        request_id = message.get("id")
        try:
            request = Request.model_validate(message)
        except ValidationError as e:
            return Response.failure(
                request_id, _describe_validation_error(e), ErrorCode.INVALID_INPUT
            )

        handler = self.handlers.get(request.type)
        if handler is None:
            return Response.failure(
                request.id,
                f"Unknown message type: {request.type}",
                ErrorCode.UNKNOWN_TYPE,
            )

        logger.debug("Handling %s (id=%s)", request.type, request.id)
        try:
            data = handler(request.params)
        except JotError as e:
            logger.info("%s failed with %s: %s", request.type, e.code, e.message)
            return Response.failure(request.id, e.message, e.code)
        except ValidationError as e:
            return Response.failure(
                request.id, _describe_validation_error(e), ErrorCode.INVALID_INPUT
            )
        except Exception as e:
            logger.exception("Unhandled error in %s", request.type)
            return Response.failure(request.id, str(e), ErrorCode.INTERNAL_ERROR)

        return Response.success(request.id, data)

    # --- Handlers ---

    def handle_ping(self, params: dict[str, Any]) -> dict[str, str]:
        return {"status": "ok", "version": HOST_VERSION}

    def handle_get_config(self, params: dict[str, Any]) -> dict[str, Any] | None:
        config = self.store.get_config()
        return config.to_wire() if config else None

    def handle_set_config(self, params: dict[str, Any]) -> dict[str, Any]:
        args = SetConfigParams.model_validate(params)
        return self.store.set_config(args.vault_path, args.comment_folder).to_wire()

    def handle_has_comments(self, params: dict[str, Any]) -> bool:
        args = UrlParams.model_validate(params)
        return self.store.has_comments(args.url)

    def handle_get_thread(self, params: dict[str, Any]) -> dict[str, Any] | None:
        args = UrlParams.model_validate(params)
        thread = self.store.get_thread(args.url)
        return thread.to_wire() if thread else None

    def handle_get_all_threads(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        return [thread.to_wire() for thread in self.store.get_all_threads()]

    def handle_append_comment(self, params: dict[str, Any]) -> dict[str, Any]:
        args = AppendCommentParams.model_validate(params)
        return self.store.append_comment(args.url, args.body, args.metadata).to_wire()

    def handle_delete_comment(self, params: dict[str, Any]) -> dict[str, Any]:
        args = DeleteCommentParams.model_validate(params)
        return self.store.delete_comment(args.url, args.comment_id).to_wire()

    def handle_delete_thread(self, params: dict[str, Any]) -> None:
        args = UrlParams.model_validate(params)
        self.store.delete_thread(args.url)
        return None
