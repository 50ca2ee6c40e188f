"""WTForms plumbing for JSON request bodies.

Forms are fed through ``data=`` rather than ``formdata``, so the stock
``InputRequired``/``Optional`` validators (which look at raw form input) do
not apply; ``Required`` and ``Nullable`` below check the processed data.
"""
from flask_wtf import FlaskForm
from wtforms import BooleanField, Field, FieldList, Form, IntegerField, StringField
from wtforms.utils import unset_value
from wtforms.validators import StopValidation

from ..utils.time import parse_iso


def _is_empty(value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


class Required:
    def __init__(self, message="This field is required."):
        self.message = message

    def __call__(self, form, field):
        if field.process_errors:
            raise StopValidation()
        if _is_empty(field.data):
            field.errors[:] = []
            raise StopValidation(self.message)


class Present(Required):
    """Like Required, but an empty string, list or object counts as given."""

    def __call__(self, form, field):
        if field.process_errors:
            raise StopValidation()
        if field.data is None:
            field.errors[:] = []
            raise StopValidation(self.message)


class Nullable:
    """Skip the remaining validators when the value is missing."""

    def __call__(self, form, field):
        if field.process_errors:
            raise StopValidation()
        if _is_empty(field.data):
            field.errors[:] = []
            raise StopValidation()


class Text(StringField):
    def process_data(self, value):
        if value is None or value is unset_value:
            self.data = None
            return
        if not isinstance(value, str):
            self.data = None
            raise ValueError("Must be a string.")
        self.data = value.strip()


class WholeNumber(IntegerField):
    def process_data(self, value):
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            self.data = None
            raise ValueError("Must be a whole number.")
        super().process_data(value)


class Flag(BooleanField):
    def process_data(self, value):
        if value is None or value is unset_value:
            self.data = None
            return
        if not isinstance(value, bool):
            self.data = None
            raise ValueError("Must be true or false.")
        self.data = value


class IsoDateTime(Field):
    def process_data(self, value):
        if value is None or value is unset_value or value == "":
            self.data = None
            return
        try:
            self.data = parse_iso(value)
        except (TypeError, ValueError):
            self.data = None
            raise ValueError("Not a valid ISO 8601 date/time.")


class JSONObject(Field):
    """Free-form JSON object stored as-is."""

    def process_data(self, value):
        if value is None or value is unset_value:
            self.data = None
            return
        if not isinstance(value, dict):
            self.data = None
            raise ValueError("Must be an object.")
        self.data = value


class ListOf(FieldList):
    """FieldList fed from a JSON array."""

    def process(self, formdata, data=unset_value, extra_filters=None):
        self.not_a_list = data is not None and data is not unset_value and not isinstance(data, (list, tuple))
        super().process(formdata, [] if self.not_a_list else data, extra_filters)

    def validate(self, form, extra_validators=()):
        if self.not_a_list:
            self.errors = ["Must be a list."]
            return False
        return super().validate(form, extra_validators)


class SubForm(Form):
    """Nested object inside a JSON body (used with FormField)."""


class ApiForm(FlaskForm):
    """Base form for JSON bodies.

    ``partial=True`` drops every field the payload does not mention, which
    is how PUT endpoints accept partial updates. ``baseline`` holds the
    stored values used by cross-field checks when one side is omitted.
    """

    class Meta:
        csrf = False

    def __init__(self, payload=None, partial=False, baseline=None, **kwargs):
        payload = payload or {}
        super().__init__(formdata=None, data=payload, **kwargs)
        self.payload = payload
        self.baseline = baseline or {}
        self.extra_errors = {}
        if partial:
            for name in list(self._fields):
                if name not in payload:
                    del self[name]

    def value(self, name):
        """Submitted value for ``name``, falling back to the baseline."""
        if name in self._fields:
            return self[name].data
        return self.baseline.get(name)

    def add_error(self, name, message):
        if name in self._fields:
            self[name].errors = list(self[name].errors) + [message]
        else:
            self.extra_errors.setdefault(name, []).append(message)

    def validate(self, extra_validators=None):
        self.extra_errors = {}
        ok = super().validate(extra_validators)
        self.validate_cross_fields()
        return ok and not self.extra_errors and not any(f.errors for f in self._fields.values())

    def validate_cross_fields(self):
        pass

    def all_errors(self):
        errors = dict(self.errors)
        for name, messages in self.extra_errors.items():
            errors[name] = list(errors.get(name, [])) + messages
        return errors

    def cleaned(self):
        """Processed values of the fields left on the form."""
        return {name: field.data for name, field in self._fields.items()}
