from timerod.models import UserRole

ELEVATED_ROLES = {UserRole.ADMIN}


def get_allowed_company_ids(user, requested_ids=None):
    """
    Returns the company ids a user may read, or None for "every company".
    - Admins can access all or any requested companies.
    - Every other role is restricted to the company it belongs to.
    - Raises PermissionError when another company is requested explicitly.
    """
    if not user:
        raise ValueError("No user provided")

    # Normalize requested_ids to a list
    if isinstance(requested_ids, int):
        requested_ids = [requested_ids]
    elif requested_ids is None:
        requested_ids = []

    if user.role in ELEVATED_ROLES:
        return list(requested_ids) or None

    if any(int(company_id) != user.company_id for company_id in requested_ids):
        raise PermissionError("Access denied to one or more requested companies")

    return [user.company_id]
