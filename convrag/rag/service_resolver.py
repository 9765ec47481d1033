from config.settings import DEFAULT_DOMAIN
from convrag.errors import ServiceResolutionError
from convrag.logger import get_logger
from convrag.models import ServiceRegistryEntry

logger = get_logger(__name__)


class ServiceResolver:
    """Map a service id or domain to its fully-qualified search service name."""

    def __init__(self, store, default_domain = DEFAULT_DOMAIN):
        self.store = store
        self.default_domain = default_domain

    def resolve(self, request):
        if request.service_id is not None:
            return self.resolve_service_id(request.service_id)
        return self.resolve_domain(request.domain_name)

    def resolve_service_id(self, service_id):
        row = self.store.get_service_by_id(service_id)
        if row is None:
            raise ServiceResolutionError(f"No active service found for service_id: {service_id}")
        return ServiceRegistryEntry.from_row(row).fq_service_name

    def resolve_domain(self, domain_name):
        row = self.store.get_service_by_domain(domain_name)
        if row is None and domain_name != self.default_domain:
            logger.info("No service registered for domain '%s', using '%s'",
                        domain_name, self.default_domain)
            row = self.store.get_service_by_domain(self.default_domain)

        if row is None:
            raise ServiceResolutionError(
                f"No service found for domain '{domain_name}' and no '{self.default_domain}' entry"
            )
        return ServiceRegistryEntry.from_row(row).fq_service_name
