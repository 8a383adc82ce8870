"""Reasons a notification could not be routed."""


class RoutingError(Exception):
    """Base class for notification routing rejections."""


class MalformedPayload(RoutingError):
    """The payload's metadata document is missing, unparseable or incomplete."""


class UnknownServer(RoutingError):
    """The notification's host matches no configured backend."""


class UnresolvableConversation(RoutingError):
    """The backend is known but the conversation could not be found."""
