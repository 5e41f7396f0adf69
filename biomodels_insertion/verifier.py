"""Release-over-release check of the BioModels cross-reference count."""
from .errors import VerificationError
from .importer.reference_database import BIOMODELS_DATABASE_NAME
from .types import VerificationResult
from .utils.logger import app_logger

logger = app_logger.bind(component="verifier")


class CrossReferenceVerifier:
    """Checks that the current release has no fewer BioModels cross-references than the previous one."""

    def __init__(self, current_client, previous_client, display_name: str = BIOMODELS_DATABASE_NAME):
        self.current_client = current_client
        self.previous_client = previous_client
        self.display_name = display_name

    def verify(self) -> VerificationResult:
        current_count = self.current_client.count_cross_references(self.display_name)
        if current_count is None:
            raise VerificationError(
                f"Unable to find {self.display_name} reference database for current release"
            )

        previous_count = self.previous_client.count_cross_references(self.display_name) or 0
        if current_count < previous_count:
            raise VerificationError(
                f"Current BioModels cross reference count ({current_count}) is lower than "
                f"the previous release's count ({previous_count})",
                context={"current": current_count, "previous": previous_count},
            )

        logger.info(f"Proper count for BioModels - current ({current_count}); previous ({previous_count})")
        return VerificationResult(current_count=current_count, previous_count=previous_count)
