from rest_framework import serializers

from core.exceptions import ApiError
from core.validators import TemplateStructureValidator


def load(serializer_class, data, many=False):
    """Parse an API payload into plain validated data."""
    serializer = serializer_class(data=data, many=many)
    if not serializer.is_valid():
        raise ApiError(
            f"Malformed {serializer_class.__name__.replace('Serializer', '')} in API response",
            errors=serializer.errors,
        )
    return serializer.validated_data


class BoardReferenceField(serializers.Field):
    """Board reference that accepts a code, an id or a nested board object."""

    def to_internal_value(self, data):
        if isinstance(data, dict):
            data = data.get('code') or data.get('id')
        if isinstance(data, bool) or not isinstance(data, (str, int)):
            raise serializers.ValidationError('Invalid board reference.')
        return str(data)

    def to_representation(self, value):
        return value


class BoardSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    code = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    is_active = serializers.BooleanField(required=False, default=True)


class AcademicYearSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    is_current = serializers.BooleanField(required=False, default=False)
    is_active = serializers.BooleanField(required=False, default=True)


class UserSerializer(serializers.Serializer):
    id = serializers.CharField()
    username = serializers.CharField()
    email = serializers.CharField(required=False, allow_blank=True, default='')
    first_name = serializers.CharField(required=False, allow_blank=True, default='')
    last_name = serializers.CharField(required=False, allow_blank=True, default='')
    role = serializers.CharField()
    department = serializers.DictField(required=False, allow_null=True, default=None)


class TokenPairSerializer(serializers.Serializer):
    access = serializers.CharField()
    refresh = serializers.CharField()


class LoginResultSerializer(serializers.Serializer):
    user = UserSerializer()
    tokens = TokenPairSerializer()


class TemplateSerializer(serializers.Serializer):
    id = serializers.CharField(required=False)
    code = serializers.CharField()
    name = serializers.CharField()
    board = BoardReferenceField(required=False, allow_null=True, default=None)
    metadata = serializers.JSONField(default=list)

    def validate_metadata(self, value):
        TemplateStructureValidator.validate_list(value)
        return value


class SubmissionDataSerializer(serializers.Serializer):
    section_index = serializers.IntegerField(min_value=0)
    row_number = serializers.IntegerField(required=False, default=0)
    data = serializers.DictField()


class SubmissionHistorySerializer(serializers.Serializer):
    id = serializers.CharField()
    action = serializers.CharField()
    performed_by_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    performed_at = serializers.DateTimeField(required=False, allow_null=True)
    details = serializers.JSONField(required=False, allow_null=True, default=None)
    previous_data = serializers.JSONField(required=False, allow_null=True, default=None)
    new_data = serializers.JSONField(required=False, allow_null=True, default=None)


class SubmissionSummarySerializer(serializers.Serializer):
    id = serializers.CharField()
    template = serializers.CharField(required=False, allow_null=True)
    template_code = serializers.CharField()
    template_name = serializers.CharField(required=False, allow_blank=True, default='')
    department = serializers.CharField(required=False, allow_null=True)
    department_name = serializers.CharField(required=False, allow_blank=True, default='')
    academic_year = serializers.CharField(required=False, allow_null=True)
    academic_year_name = serializers.CharField(required=False, allow_blank=True, default='')
    # The API owns the status set; only the reviewable ones are acted on here
    status = serializers.CharField()
    submitted_by_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    submitted_at = serializers.DateTimeField(required=False, allow_null=True)


class SubmissionSerializer(SubmissionSummarySerializer):
    verified_by = serializers.JSONField(required=False, allow_null=True, default=None)
    verified_at = serializers.DateTimeField(required=False, allow_null=True)
    rejection_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    data_rows = SubmissionDataSerializer(many=True, required=False, default=list)
    history = SubmissionHistorySerializer(many=True, required=False, default=list)

    def validate_verified_by(self, value):
        # The API reports the verifier either as an id or as a user object
        if isinstance(value, dict):
            return value.get('name') or value.get('email') or str(value.get('id', ''))
        return str(value) if value is not None else None


class SubmissionStatsSerializer(serializers.Serializer):
    pending = serializers.IntegerField(required=False, default=0)
    approved = serializers.IntegerField(required=False, default=0)
    rejected = serializers.IntegerField(required=False, default=0)
    draft = serializers.IntegerField(required=False, default=0)
    total = serializers.IntegerField(required=False, default=0)


class TemplateProgressSerializer(serializers.Serializer):
    code = serializers.CharField()
    name = serializers.CharField(required=False, allow_blank=True, default='')
    status = serializers.CharField()
    last_updated = serializers.DateTimeField(required=False, allow_null=True, default=None)
    verified_by = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    rejection_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    submission_id = serializers.CharField(required=False, allow_null=True, default=None)


class DepartmentProgressSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    code = serializers.CharField(required=False, allow_blank=True, default='')
    completion_rate = serializers.FloatField(required=False, default=0)
    completed_submissions = serializers.IntegerField(required=False, default=0)
    total_required = serializers.IntegerField(required=False, default=0)
    templates = TemplateProgressSerializer(many=True, required=False, default=list)


class DepartmentBreakdownSerializer(serializers.Serializer):
    academic_year = serializers.DictField(required=False, allow_null=True, default=None)
    board = serializers.DictField(required=False, allow_null=True, default=None)
    overall_completion_rate = serializers.FloatField(required=False, default=0)
    completed_submissions = serializers.IntegerField(required=False, default=0)
    total_required_submissions = serializers.IntegerField(required=False, default=0)
    departments = DepartmentProgressSerializer(many=True, required=False, default=list)
