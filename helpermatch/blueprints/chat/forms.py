from wtforms.validators import Length, NumberRange

from ...utils.forms import ApiForm, Required, Text, WholeNumber


class ChatCreateForm(ApiForm):
    employee_id = WholeNumber(validators=[Required(), NumberRange(min=1)])


class MessageForm(ApiForm):
    body = Text(validators=[Required("Message cannot be empty"),
                            Length(max=2000, message="Message must be at most 2000 characters")])
