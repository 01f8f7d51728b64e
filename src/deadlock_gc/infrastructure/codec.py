"""Payload codec for message bodies"""

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from deadlock_gc.shared.exceptions import ReplyDecodeError

M = TypeVar("M", bound=BaseModel)


class PayloadCodec:
    """Encodes pydantic message bodies to bytes and back (JSON)"""

    def encode(self, body: BaseModel) -> bytes:
        return body.model_dump_json().encode("utf-8")

    def decode(self, payload: bytes, model: type[M]) -> M:
        """Decode a payload into the given model

        Raises:
            ReplyDecodeError: If the payload is not a valid encoding of model
        """
        try:
            return model.model_validate_json(payload)
        except ValidationError as e:
            raise ReplyDecodeError(
                f"Cannot decode {model.__name__}: {e.error_count()} error(s)"
            ) from e
