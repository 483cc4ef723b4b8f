from prometheus_client import Counter, Gauge, Histogram


class ReservationMetrics:
    """
    Trip Reservation Core Metrics Collector

    Tracks approval workflow outcomes and seat ledger mutations
    """

    def __init__(self):
        # ========== Approval Workflow Metrics ==========
        self.request_resolutions = Counter(
            'reservation_request_resolutions_total',
            'Reservation request approve/reject attempts',
            ['action', 'result'],  # result: success or error code
        )

        self.approval_duration = Histogram(
            'reservation_request_approval_duration_seconds',
            'Approval workflow duration',
            ['result'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        # ========== Seat Ledger Metrics ==========
        self.seat_ledger_operations = Counter(
            'seat_ledger_operations_total',
            'Seat ledger operations',
            ['operation', 'result'],  # operation: check/reserve/release
        )

        self.seats_moved = Counter(
            'seat_ledger_seats_total',
            'Seats reserved or released',
            ['operation'],
        )

        self.segment_seats_available = Gauge(
            'trip_segment_seats_available',
            'Available seats on a trip leg after the last mutation',
            ['trip_id'],
        )

    # ========== Helper Methods ==========

    def record_resolution(self, *, action: str, result: str, duration: float | None = None):
        self.request_resolutions.labels(action=action, result=result).inc()
        if action == 'approve' and duration is not None:
            self.approval_duration.labels(result=result).observe(duration)

    def record_ledger_operation(self, *, operation: str, result: str, seats: int = 0):
        self.seat_ledger_operations.labels(operation=operation, result=result).inc()
        if result == 'success' and seats:
            self.seats_moved.labels(operation=operation).inc(seats)

    def update_segment_availability(self, *, trip_id: str, available: int):
        self.segment_seats_available.labels(trip_id=trip_id).set(available)


# Global metrics instance
metrics = ReservationMetrics()
