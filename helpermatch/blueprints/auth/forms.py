from wtforms.validators import AnyOf, Email, Length

from ...models.user import ROLES
from ...utils.forms import ApiForm, Nullable, Required, Text


class LoginForm(ApiForm):
    email = Text("Email", validators=[Required(), Email()])
    password = Text("Password", validators=[Required()])


class SignupForm(ApiForm):
    email = Text("Email", validators=[Required(), Email(), Length(max=255)])
    password = Text("Password", validators=[Required(), Length(min=8, max=128)])
    role = Text("Role", validators=[Required(), AnyOf(ROLES, message="Role must be one of: %(values)s")])
    name = Text("Name", validators=[Nullable(), Length(max=120)])
