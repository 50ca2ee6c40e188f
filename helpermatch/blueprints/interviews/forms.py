from wtforms.validators import URL, AnyOf, Length, NumberRange

from ...models.interview import INTERVIEW_STATUSES
from ...utils.forms import ApiForm, IsoDateTime, Nullable, Required, Text, WholeNumber
from ...utils.time import utcnow


class InterviewForm(ApiForm):
    employee_id = WholeNumber(validators=[Required(), NumberRange(min=1)])
    starts_at = IsoDateTime(validators=[Required()])
    duration_minutes = WholeNumber(validators=[Nullable(), NumberRange(min=15, max=480)])
    location = Text(validators=[Nullable(), Length(max=255)])
    meeting_url = Text(validators=[Nullable(), URL(require_tld=False), Length(max=1024)])
    notes = Text(validators=[Nullable(), Length(max=2000)])

    def validate_cross_fields(self):
        if "starts_at" in self and self.starts_at.data is not None and self.starts_at.data <= utcnow():
            self.add_error("starts_at", "Interview must be scheduled in the future")


class InterviewUpdateForm(InterviewForm):
    employee_id = None
    status = Text(validators=[Required(), AnyOf(INTERVIEW_STATUSES, message="Status must be one of: %(values)s")])
