from django.contrib import messages


class Notification:
    __slots__ = ('level', 'message')

    SUCCESS = 'success'
    ERROR = 'error'

    def __init__(self, level, message):
        self.level = level
        self.message = message

    def __eq__(self, other):
        return isinstance(other, Notification) and (self.level, self.message) == (other.level, other.message)

    def __repr__(self):
        return f"<Notification {self.level}: {self.message}>"


LEVELS = {
    Notification.SUCCESS: messages.SUCCESS,
    Notification.ERROR: messages.ERROR,
}


def flash(request, notifications):
    """Hand notifications raised by a controller to the messages framework"""
    for notification in notifications:
        messages.add_message(request, LEVELS[notification.level], notification.message)
