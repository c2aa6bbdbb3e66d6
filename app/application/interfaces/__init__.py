"""Application interfaces (ports): document store and gateway protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.document_store import (
    ICollection,
    IDocumentRef,
    IDocumentStore,
    IQuery,
    ISnapshot,
)
from app.application.interfaces.gateways import (
    IIdentityProvider,
    IMailer,
    IObjectStorage,
    IPushGateway,
)

__all__ = [
    "ICollection",
    "IDocumentRef",
    "IDocumentStore",
    "IIdentityProvider",
    "IMailer",
    "IObjectStorage",
    "IPushGateway",
    "IQuery",
    "ISnapshot",
]
