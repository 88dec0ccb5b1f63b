import typing as tp

from .schemas import RouteKind

ADMIN_PREFIX = "/admin"
PUBLIC_PATHS: tp.FrozenSet[str] = frozenset({"/", "/flights", "/flights/"})
PUBLIC_PREFIXES: tp.Tuple[str, ...] = ("/flights/",)


class RouteClassifier:
    """Sorts request paths into public, admin and unrecognized routes.

    Args:
        public_paths: Paths matched exactly
        public_prefixes: Prefixes that make any path below them public
        admin_prefix: Prefix of the admin surface
    """

    def __init__(
        self,
        public_paths: tp.Iterable[str] = PUBLIC_PATHS,
        public_prefixes: tp.Iterable[str] = PUBLIC_PREFIXES,
        admin_prefix: str = ADMIN_PREFIX,
    ) -> None:
        self.public_paths = frozenset(public_paths)
        self.public_prefixes = tuple(public_prefixes)
        self.admin_prefix = admin_prefix

    def classify(self, path: str) -> RouteKind:
        if path.startswith(self.admin_prefix):
            return RouteKind.ADMIN

        if path in self.public_paths or path.startswith(self.public_prefixes):
            return RouteKind.PUBLIC

        return RouteKind.UNRECOGNIZED

    __call__ = classify


default_classifier = RouteClassifier()


def classify(path: str) -> RouteKind:
    """Classifies ``path`` with the default route table."""
    return default_classifier.classify(path)
