from wtforms.validators import AnyOf, Length, NumberRange

from ...models.employee_profile import DOCUMENT_TYPES
from ...utils.forms import ApiForm, Required, Text, WholeNumber


class UploadForm(ApiForm):
    file_name = Text(validators=[Required("File name is required"), Length(max=255)])
    file_size = WholeNumber(validators=[Required(), NumberRange(min=1, message="File size must be greater than 0")])
    content_type = Text(validators=[Required("Content type is required"), Length(max=100)])


class DocumentUploadForm(UploadForm):
    document_type = Text(validators=[Required(), AnyOf(DOCUMENT_TYPES, message="documentType must be one of: %(values)s")])
