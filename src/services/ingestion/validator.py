"""
Marketplace listing validation for product records
Checks required fields, length limits, bullet and image counts, price and attributes
"""

import math
import logging
from typing import Any, Dict, List

from .config import (
    MARKETPLACE_REQUIREMENTS,
    MIN_TITLE_LENGTH,
    VALIDATION_PENALTIES,
    VALID_SCORE_THRESHOLD,
)
from .models import ListingValidationReport, ProductRecord, ValidationIssue

# Configure logger
logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    if isinstance(value, float) and math.isnan(value):
        return True
    # A zero price counts as missing
    return not value


class ListingValidator:
    """Validates product records against marketplace listing requirements"""

    def __init__(self):
        self.requirements = MARKETPLACE_REQUIREMENTS
        self.penalties = VALIDATION_PENALTIES

    def get_requirements(self, marketplace: str) -> Dict[str, Any]:
        """Requirements for a marketplace (case-insensitive), default set if unknown"""
        key = (marketplace or "").strip().lower()
        return self.requirements.get(key, self.requirements["default"])

    def validate(self, record: ProductRecord, marketplace: str) -> ListingValidationReport:
        """
        Validate one record for a marketplace

        Every finding lowers the score from 100 by a per-check penalty. The
        record is valid when no required field is missing and the score is at
        least 70.

        Args:
            record: Product record (usually after enhancement)
            marketplace: Target marketplace name

        Returns:
            ListingValidationReport with issues, missing fields and score
        """
        requirements = self.get_requirements(marketplace)
        issues: List[ValidationIssue] = []
        score = 100

        # 1. Required fields
        missing_fields = self.check_required_fields(record, requirements)
        for name in missing_fields:
            issues.append(
                ValidationIssue(
                    severity="ERROR",
                    field=name,
                    message=f'Required field "{name}" is missing',
                    recommendation=f"Add the required {name} field",
                )
            )
        score -= len(missing_fields) * self.penalties["missing_field"]

        # 2. Field formats (only for fields that are present)
        checks = [
            ("title", record.title, self.validate_title),
            ("description", record.description, self.validate_description),
            ("bullet_points", record.bullet_points, self.validate_bullet_points),
            ("images", record.images, self.validate_images),
            ("price", record.price, self.validate_price),
        ]
        for name, value, check in checks:
            if _is_blank(value):
                continue
            found = check(value, requirements)
            issues.extend(found)
            score -= len(found) * self.penalties[name]

        # 3. Marketplace attributes
        attribute_issues = self.validate_attributes(record, requirements)
        issues.extend(attribute_issues)
        score -= len(attribute_issues) * self.penalties["attributes"]

        score = max(0, score)
        is_valid = score >= VALID_SCORE_THRESHOLD and not missing_fields

        logger.debug(
            f"[{record.product_id}] Validation for {marketplace}: score={score}, "
            f"issues={len(issues)}, missing={missing_fields}"
        )

        return ListingValidationReport(
            product_id=record.product_id,
            marketplace=marketplace,
            is_valid=is_valid,
            score=score,
            missing_fields=missing_fields,
            issues=issues,
        )

    def validate_batch(
        self, records: List[ProductRecord], marketplace: str
    ) -> List[ListingValidationReport]:
        logger.info(f"Validating {len(records)} records for {marketplace}...")
        reports = [self.validate(record, marketplace) for record in records]

        valid_count = sum(1 for r in reports if r.is_valid)
        logger.info(f" Listing validation: {valid_count}/{len(reports)} valid")
        return reports

    def check_required_fields(
        self, record: ProductRecord, requirements: Dict[str, Any]
    ) -> List[str]:
        """Names of required fields that are absent or empty"""
        return [
            name
            for name in requirements["required_fields"]
            if _is_blank(self._field_value(record, name))
        ]

    def validate_title(self, title: str, requirements: Dict[str, Any]) -> List[ValidationIssue]:
        issues = []
        max_length = requirements["max_title_length"]

        if len(title) > max_length:
            issues.append(
                ValidationIssue(
                    severity="ERROR",
                    field="title",
                    message=f"Title exceeds maximum length of {max_length} characters",
                    recommendation=f"Shorten title to {max_length} characters or less",
                )
            )
        if len(title) < MIN_TITLE_LENGTH:
            issues.append(
                ValidationIssue(
                    severity="WARNING",
                    field="title",
                    message=f"Title is too short (less than {MIN_TITLE_LENGTH} characters)",
                    recommendation="Add more descriptive content to the title",
                )
            )
        return issues

    def validate_description(
        self, description: str, requirements: Dict[str, Any]
    ) -> List[ValidationIssue]:
        issues = []
        max_length = requirements["max_description_length"]
        min_length = requirements["min_description_length"]

        if len(description) > max_length:
            issues.append(
                ValidationIssue(
                    severity="ERROR",
                    field="description",
                    message=f"Description exceeds maximum length of {max_length} characters",
                    recommendation=f"Shorten description to {max_length} characters or less",
                )
            )
        if len(description) < min_length:
            issues.append(
                ValidationIssue(
                    severity="WARNING",
                    field="description",
                    message=f"Description is too short (less than {min_length} characters)",
                    recommendation=(
                        f"Add more descriptive content to reach at least {min_length} characters"
                    ),
                )
            )
        return issues

    def validate_bullet_points(
        self, bullet_points: List[str], requirements: Dict[str, Any]
    ) -> List[ValidationIssue]:
        issues = []
        max_count = requirements["max_bullet_points"]
        max_length = requirements["max_bullet_point_length"]

        if len(bullet_points) > max_count:
            issues.append(
                ValidationIssue(
                    severity="WARNING",
                    field="bullet_points",
                    message=f"Too many bullet points ({len(bullet_points)} > {max_count})",
                    recommendation=f"Reduce to {max_count} bullet points or less",
                )
            )

        for index, point in enumerate(bullet_points, 1):
            if len(point) > max_length:
                issues.append(
                    ValidationIssue(
                        severity="WARNING",
                        field="bullet_points",
                        message=(
                            f"Bullet point {index} exceeds maximum length of "
                            f"{max_length} characters"
                        ),
                        recommendation=f"Shorten bullet point to {max_length} characters or less",
                    )
                )
        return issues

    def validate_images(
        self, images: List[str], requirements: Dict[str, Any]
    ) -> List[ValidationIssue]:
        issues = []
        min_count = requirements["min_images"]
        max_count = requirements["max_images"]

        if len(images) < min_count:
            issues.append(
                ValidationIssue(
                    severity="ERROR",
                    field="images",
                    message=f"Not enough images ({len(images)} < {min_count})",
                    recommendation=f"Add at least {min_count} images",
                )
            )
        if len(images) > max_count:
            issues.append(
                ValidationIssue(
                    severity="WARNING",
                    field="images",
                    message=f"Too many images ({len(images)} > {max_count})",
                    recommendation=f"Reduce to {max_count} images or less",
                )
            )
        return issues

    def validate_price(self, price: float, requirements: Dict[str, Any]) -> List[ValidationIssue]:
        if math.isinf(price):
            return [
                ValidationIssue(
                    severity="ERROR",
                    field="price",
                    message="Invalid price format",
                    recommendation="Enter a valid numeric price",
                )
            ]
        if price <= 0:
            return [
                ValidationIssue(
                    severity="ERROR",
                    field="price",
                    message="Price must be greater than 0",
                    recommendation="Enter a valid price greater than 0",
                )
            ]
        return []

    def validate_attributes(
        self, record: ProductRecord, requirements: Dict[str, Any]
    ) -> List[ValidationIssue]:
        """Marketplace attributes may be declared fields or extension fields"""
        return [
            ValidationIssue(
                severity="WARNING",
                field="attributes",
                message=f"Missing required attribute: {name}",
                recommendation=f"Add the {name} attribute",
            )
            for name in requirements["required_attributes"]
            if _is_blank(self._field_value(record, name))
        ]

    @staticmethod
    def _field_value(record: ProductRecord, name: str) -> Any:
        if name in ProductRecord.model_fields:
            return getattr(record, name)
        return record.extras.get(name)
