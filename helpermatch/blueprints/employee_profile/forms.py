from wtforms import FormField
from wtforms.validators import URL, AnyOf, Email, Length, NumberRange, Regexp

from ...models.employee_profile import CIVIL_STATUSES, DOCUMENT_STATUSES, DOCUMENT_TYPES, EMPLOYMENT_TYPES
from ...utils.forms import ApiForm, Flag, IsoDateTime, ListOf, Nullable, Required, SubForm, Text, WholeNumber

PH_PHONE = Regexp(r"^(\+63|0)[0-9]{10}$", message="Invalid Philippine phone number format")
EMAIL = Email(message="Invalid email address format")
SALARY = NumberRange(min=3000, max=50000, message="Salary must be between ₱3,000 and ₱50,000")


class ReferenceForm(SubForm):
    name = Text(validators=[Required(), Length(min=2, max=100, message="Reference name must be at least 2 characters")])
    relationship = Text(validators=[Required("Relationship must be specified"), Length(min=2, max=100)])
    company = Text(validators=[Nullable(), Length(max=200)])
    phone = Text(validators=[Required(), PH_PHONE])
    email = Text(validators=[Nullable(), EMAIL])
    duration = Text(validators=[Nullable(), Length(max=100)])
    notes = Text(validators=[Nullable(), Length(max=1000)])


class DocumentFields:
    type = Text(validators=[Required(), AnyOf(DOCUMENT_TYPES, message="Document type must be one of: %(values)s")])
    file_name = Text(validators=[Required("File name is required"), Length(max=255)])
    file_url = Text(validators=[Required(), URL(require_tld=False, message="Invalid file URL")])
    storage_key = Text(validators=[Nullable(), Length(max=1024)])
    file_size = WholeNumber(validators=[Required(), NumberRange(min=1, message="File size must be greater than 0")])
    mime_type = Text(validators=[Required("MIME type is required"), Length(max=100)])
    expires_at = IsoDateTime()


class DocumentEntryForm(SubForm, DocumentFields):
    pass


class DocumentForm(ApiForm, DocumentFields):
    pass


class DocumentVerifyForm(ApiForm):
    status = Text(validators=[Required(), AnyOf(DOCUMENT_STATUSES, message="Status must be one of: %(values)s")])
    rejection_reason = Text(validators=[Nullable(), Length(max=500)])

    def validate_cross_fields(self):
        if self.status.data == "REJECTED" and not self.rejection_reason.data:
            self.add_error("rejection_reason", "A reason is required when rejecting a document")


class EmployeeProfileForm(ApiForm):
    # public
    first_name = Text(validators=[Required(), Length(min=2, max=50, message="First name must be 2-50 characters")])
    last_name = Text(validators=[Required(), Length(min=2, max=50, message="Last name must be 2-50 characters")])
    age = WholeNumber(validators=[Required(), NumberRange(min=18, max=65, message="Age must be between 18 and 65")])
    birth_date = IsoDateTime()
    civil_status = Text(validators=[Required(), AnyOf(CIVIL_STATUSES, message="Civil status must be one of: %(values)s")])
    city = Text(validators=[Required("City is required"), Length(min=2, max=100)])
    province = Text(validators=[Required("Province is required"), Length(min=2, max=100)])
    photo_url = Text(validators=[Nullable(), URL(require_tld=False), Length(max=1024)])

    # private
    exact_address = Text(validators=[Required(), Length(min=10, max=500,
                                                         message="Exact address must be 10-500 characters")])
    phone = Text(validators=[Required(), PH_PHONE])
    email = Text(validators=[Required(), EMAIL])

    # professional
    skills = ListOf(
        Text(validators=[Required(), Length(min=2, message="Skill must be at least 2 characters")]),
        validators=[Required("At least 3 skills required"),
                    Length(min=3, max=10, message="Provide between 3 and 10 skills")],
    )
    experience = WholeNumber(validators=[Required(), NumberRange(min=0, max=50,
                                                                 message="Experience must be between 0 and 50 years")])
    headline = Text(validators=[Required(), Length(min=10, max=200, message="Headline must be 10-200 characters")])

    # preferences
    salary_min = WholeNumber(validators=[Required(), SALARY])
    salary_max = WholeNumber(validators=[Required(), SALARY])
    employment_type = Text(validators=[Required(), AnyOf(EMPLOYMENT_TYPES,
                                                         message="Employment type must be one of: %(values)s")])
    availability_date = IsoDateTime()
    days_off = ListOf(
        Text(validators=[Required()]),
        validators=[Required("Select at least one day off"),
                    Length(min=1, max=7, message="Select between 1 and 7 days off")],
    )
    overtime = Flag()
    holiday_work = Flag()
    visibility = Flag()

    references = ListOf(
        FormField(ReferenceForm),
        validators=[Required("At least one reference required"),
                    Length(min=1, max=3, message="Provide between 1 and 3 references")],
    )
    documents = ListOf(FormField(DocumentEntryForm))

    def validate_cross_fields(self):
        low, high = self.value("salary_min"), self.value("salary_max")
        if low is not None and high is not None and low > high:
            self.add_error("salary_max", "Minimum salary must be less than or equal to maximum salary")


class EmployeeProfileUpdateForm(EmployeeProfileForm):
    """Partial update; documents are managed through their own endpoints."""
    documents = None
