from shared.middleware.request_id import request_id_middleware
from shared.middleware.error_handler import domain_exception_handler, error_envelope_middleware

__all__ = ["request_id_middleware", "domain_exception_handler", "error_envelope_middleware"]
