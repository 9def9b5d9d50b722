from marshmallow import EXCLUDE, Schema, fields, pre_load


class UserPayloadSchema(Schema):
    """
    Shape and type checks for user bodies.

    Presence rules live in the service layer, so nothing is required here
    and text fields accept null; an absent key stays absent in the result.
    """

    class Meta:
        unknown = EXCLUDE

    first_name = fields.Str(allow_none=True)
    last_name = fields.Str(allow_none=True)
    email = fields.Str(allow_none=True)
    password = fields.Str(allow_none=True)
    birthday = fields.Date(allow_none=True)

    @pre_load
    def blank_birthday_is_null(self, data, **kwargs):
        if isinstance(data, dict) and data.get("birthday") == "":
            data = {**data, "birthday": None}
        return data

