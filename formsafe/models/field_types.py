# formsafe/models/field_types.py
"""
Annotated field types shared by the storage entities.

Each type runs one validation_service validator as a pydantic plain
validator, so the validator alone decides what is accepted and how the
value is normalized. Validator errors are not ValueErrors and therefore
reach the caller unchanged instead of being folded into a ValidationError.
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import Field, PlainSerializer, PlainValidator, ValidationInfo

from formsafe.services import validation_service as validate
from formsafe.services.validation_service import Validator


def validated_by(validator: Validator) -> PlainValidator:
    """Attach a (value, field) validator to a model field."""

    def run(value: Any, info: ValidationInfo) -> Any:
        return validator(value, info.field_name)

    return PlainValidator(run)


OptionalId = Annotated[Optional[int], validated_by(validate.optional_positive_int)]
PositiveInt = Annotated[int, validated_by(validate.positive_int)]

Money = Annotated[float, validated_by(validate.positive_money)]
Discount = Annotated[float, validated_by(validate.negative_discount)]

FreeText = Annotated[str, validated_by(validate.free_text)]
OptionalFreeText = Annotated[Optional[str], validated_by(validate.optional_free_text)]
StateCode = Annotated[str, validated_by(validate.state_code)]
ZipCode = Annotated[str, validated_by(validate.zip_code)]
Email = Annotated[str, validated_by(validate.email)]

# Secrets stay out of repr()
PasswordHash = Annotated[str, validated_by(validate.password_hash), Field(repr=False)]
Salt = Annotated[str, validated_by(validate.salt), Field(repr=False)]
AuthenticationToken = Annotated[
    Optional[str], validated_by(validate.authentication_token), Field(repr=False)
]

# Stored as datetime, dumped in MySQL format
MySQLDateTime = Annotated[
    datetime,
    validated_by(validate.mysql_datetime),
    PlainSerializer(validate.format_mysql_datetime, return_type=str)
]
