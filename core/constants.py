from django.db import models


class UserRoles(models.TextChoices):
    FACULTY = 'faculty', 'Faculty'
    IQAC_DIRECTOR = 'iqac_director', 'IQAC Director'
    ADMIN = 'admin', 'Admin'


class SubmissionStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    SUBMITTED = 'submitted', 'Submitted'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


# Statuses on which reviewer actions are offered
REVIEWABLE_STATUSES = (SubmissionStatus.SUBMITTED,)


class FormAction(models.TextChoices):
    CREATE = 'create', 'Create'
    EDIT = 'edit', 'Edit'


class ColumnType(models.TextChoices):
    SINGLE = 'single', 'Single'
    GROUP = 'group', 'Group'


ERROR_MESSAGES = {
    'GENERIC': 'Something went wrong. Please try again.',
    'CACHE': 'A caching error occurred',
}
