from kubecatalog.domain.shared.model.value import ValueObject


class TransformWarning(ValueObject):
    """A recoverable problem with one resource or entity.

    ``kind`` names what was being handled (an XRD, a CRD, a Template or an
    API entity) so operators can tell which output went missing.
    """

    resource: str
    kind: str
    message: str
