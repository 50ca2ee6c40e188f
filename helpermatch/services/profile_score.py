MAX_SCORE = 100


def compute_profile_score(profile):
    """Completeness score for an employee profile, 0..100.

    Works on the model (documents/references relationships) or on any object
    with the same attribute names. Each section adds a fixed number of points;
    there is no floor, so dropping a field lowers the score.
    """
    score = 0

    if profile.first_name and profile.last_name:
        score += 10
    if profile.age and profile.civil_status:
        score += 10

    if len(profile.skills or []) >= 3:
        score += 15
    if profile.experience is not None:
        score += 10

    if profile.salary_min and profile.salary_max:
        score += 10
    if profile.employment_type:
        score += 5

    verified = sum(1 for d in (profile.documents or []) if d.status == "VERIFIED")
    score += min(verified * 5, 25)

    if len(profile.references or []) >= 1:
        score += 10

    if profile.phone and profile.email:
        score += 5

    return min(score, MAX_SCORE)
