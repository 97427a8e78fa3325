"""Exceptions raised while reading schedules and their annotations."""


class AnnotationParseError(ValueError):
    """An annotation string could not be interpreted.

    annotation is the full text as it appeared on the schedule, fragment the part that failed.
    """

    def __init__(self, message: str, annotation: str, fragment: str | None = None):
        self.annotation = annotation
        self.fragment = fragment
        super().__init__(f"{message} (annotation: {annotation!r})")


class ScheduleLoadError(ValueError):
    pass
