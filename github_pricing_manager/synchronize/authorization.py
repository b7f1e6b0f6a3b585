"""Checks that a pricing change was pushed by privileged organization members."""

from githubkit.exception import GitHubException

from github_pricing_manager.synchronize.context import PushEventContext, is_push_event
from github_pricing_manager.utils.constants import PRIVILEGED_ORGANIZATION_ROLES


async def is_user_admin_or_billing_manager(context: PushEventContext, username: str | None) -> bool:
    """Return True if the user is an admin or billing manager of the organization.

    An absent identity or a failed lookup counts as unauthorized.
    """
    if not username:
        return False
    try:
        role = await context.github_adapter.get_organization_membership_role(context.organization, username)
    except GitHubException as e:
        context.logger.error("Failed to look up organization membership", username=username, error=str(e))
        return False
    return role in PRIVILEGED_ORGANIZATION_ROLES


async def is_authed(context: PushEventContext) -> bool:
    """Return True only if both the sender and the pusher of a push event are privileged."""
    if not is_push_event(context):
        context.logger.debug("Not a push event")
        return False

    payload = context.payload
    # who triggered the event
    sender = payload.sender.login if payload.sender else None
    # who pushed the code
    pusher = payload.pusher.name if payload.pusher else None

    is_pusher_authed = await is_user_admin_or_billing_manager(context, pusher)
    is_sender_authed = await is_user_admin_or_billing_manager(context, sender)

    if not is_pusher_authed:
        context.logger.error("Pusher is not an admin or billing manager", pusher=pusher)
    if not is_sender_authed:
        context.logger.error("Sender is not an admin or billing manager", sender=sender)

    return is_pusher_authed and is_sender_authed
