from .centers import router as centers
from .offerings import router as offerings
from .availability import router as availability
from .bookings import router as bookings
