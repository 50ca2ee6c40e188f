from wtforms.validators import Length

from ...utils.forms import ApiForm, JSONObject, Present, Required, Text


class SavedSearchForm(ApiForm):
    name = Text(validators=[Required(), Length(min=1, max=100, message="Name must be 1-100 characters")])
    params_json = JSONObject(validators=[Present("Search parameters are required")])
