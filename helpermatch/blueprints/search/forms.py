from wtforms.validators import AnyOf, Length, NumberRange

from ...models.employee_profile import EMPLOYMENT_TYPES
from ...services.search_query import SORTS
from ...utils.forms import ApiForm, IsoDateTime, ListOf, Nullable, Required, Text, WholeNumber

SYNC_TYPES = ("single", "batch", "full", "remove")


class SearchQueryForm(ApiForm):
    """Query-string parameters of the public search page."""

    q = Text(validators=[Nullable(), Length(max=200)])
    city = Text(validators=[Nullable(), Length(max=100)])
    province = Text(validators=[Nullable(), Length(max=100)])
    skills = Text(validators=[Nullable(), Length(max=500)])
    live_in_out = Text(validators=[Nullable(), AnyOf(EMPLOYMENT_TYPES, message="live_in_out must be one of: %(values)s")])
    experience_band = Text(validators=[Nullable(), AnyOf(("0-1", "2-3", "4-5", "6+"),
                                                         message="experience_band must be one of: %(values)s")])
    salary_min = WholeNumber(validators=[Nullable(), NumberRange(min=0)])
    salary_max = WholeNumber(validators=[Nullable(), NumberRange(min=0)])
    availability_date = IsoDateTime()
    page = WholeNumber(validators=[Nullable(), NumberRange(min=1)])
    sort = Text(validators=[Nullable(), AnyOf(tuple(SORTS), message="sort must be one of: %(values)s")])

    def skill_list(self):
        return [s.strip() for s in (self.skills.data or "").split(",") if s.strip()]


class SyncForm(ApiForm):
    type = Text(validators=[Required(), AnyOf(SYNC_TYPES, message="type must be one of: %(values)s")])
    user_id = WholeNumber(validators=[Nullable(), NumberRange(min=1)])
    user_ids = ListOf(WholeNumber(validators=[Required(), NumberRange(min=1)]))

    def validate_cross_fields(self):
        kind = self.type.data
        if kind in ("single", "remove") and not self.user_id.data:
            self.add_error("user_id", f"userId required for {kind}")
        if kind == "batch" and not self.user_ids.data:
            self.add_error("user_ids", "userIds required for batch sync")
