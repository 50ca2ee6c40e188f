from wtforms.validators import AnyOf, Email, Length, NumberRange, Regexp

from ...models.employer_profile import ARRANGEMENTS, HOUSEHOLD_SIZES
from ...services.payments import PaymentProvider
from ...utils.forms import ApiForm, Flag, JSONObject, Nullable, Required, Text, WholeNumber

BUDGET = NumberRange(min=3000, max=50000, message="Budget must be between ₱3,000 and ₱50,000")


class EmployerProfileForm(ApiForm):
    company_name = Text(validators=[Required(), Length(min=2, max=100, message="Company name must be 2-100 characters")])
    contact_person = Text(validators=[Required(), Length(min=2, max=100,
                                                         message="Contact person name must be 2-100 characters")])
    city = Text(validators=[Required("City is required"), Length(min=2, max=100)])
    province = Text(validators=[Required("Province is required"), Length(min=2, max=100)])
    contact_email = Text(validators=[Nullable(), Email(message="Invalid email address format")])
    contact_phone = Text(validators=[Nullable(), Regexp(r"^(\+63|0)[0-9]{10}$",
                                                        message="Invalid Philippine phone number format")])
    about_text = Text(validators=[Nullable(), Length(max=500, message="About text must be less than 500 characters")])
    household_size = Text(validators=[Nullable(), AnyOf(HOUSEHOLD_SIZES, message="Household size must be one of: %(values)s")])
    preferred_arrangement = Text(validators=[Nullable(), AnyOf(ARRANGEMENTS,
                                                               message="Arrangement must be one of: %(values)s")])
    budget_min = WholeNumber(validators=[Nullable(), BUDGET])
    budget_max = WholeNumber(validators=[Nullable(), BUDGET])

    requirements = JSONObject()
    language_requirements = JSONObject()
    work_schedule = JSONObject()
    benefits_policies = JSONObject()
    accommodation_details = JSONObject()

    def validate_cross_fields(self):
        low, high = self.value("budget_min"), self.value("budget_max")
        if low is not None and high is not None and low > high:
            self.add_error("budget_max", "Minimum budget must be less than or equal to maximum budget")


class SubscribeForm(ApiForm):
    provider = Text(validators=[Required(), AnyOf([p.value for p in PaymentProvider],
                                                  message="Provider must be one of: %(values)s")])
    payment_method_id = Text(validators=[Nullable(), Length(max=255)])


class SubscriptionActionForm(ApiForm):
    action = Text(validators=[Required(), AnyOf(["renew"], message="Invalid action")])


class SearchFilterForm(ApiForm):
    name = Text(validators=[Required(), Length(min=1, max=100, message="Name must be 1-100 characters")])
    filters = JSONObject()
    is_default = Flag()
