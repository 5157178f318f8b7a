from datetime import date, datetime, timezone

class DateTimeSerializerVisitor:
    """Visitor that turns datetimes in nested documents into JSON-safe ISO strings.

    Naive datetimes come back from Mongo in UTC, so they are tagged as such
    before formatting.
    """
    def visit(self, obj):
        if isinstance(obj, dict):
            return {key: self.visit(value) for key, value in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self.visit(item) for item in obj]
        elif isinstance(obj, datetime):
            if obj.tzinfo is None:
                obj = obj.replace(tzinfo=timezone.utc)
            return obj.isoformat()
        elif isinstance(obj, date):
            return obj.isoformat()
        return obj
