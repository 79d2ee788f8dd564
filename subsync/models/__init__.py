from subsync.models.user import User  # noqa
from subsync.models.auth_session import AuthSession  # noqa
from subsync.models.plan import Plan  # noqa
from subsync.models.discount import Discount  # noqa
from subsync.models.subscription import Subscription  # noqa
from subsync.models.billing_record import BillingRecord  # noqa
from subsync.models.recommendation import Recommendation  # noqa
from subsync.models.notification import Notification  # noqa
from subsync.models.usage_record import UsageRecord  # noqa
from subsync.models.password_reset import PasswordReset  # noqa
