# rentmatch/client.py
import logging
import os

import requests

from .errors import ERRORS_BY_CODE, DuplicateRequest, LimitExceeded
from .services.eligibility import evaluate_eligibility, BLOCKED_DUPLICATE
from .services.activity import evaluate_activity

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:5000/api'


class RentMatchClient:
    """Thin client for the RentMatch REST API.

    Backend failures are raised as the same exceptions the services raise
    (DuplicateRequest, LimitExceeded, InvalidTransition, NotFound,
    ValidationFailed); anything else is a requests.HTTPError.
    """

    def __init__(self, base_url=None, session=None, timeout=10):
        self.base_url = (base_url or os.environ.get('RENTMATCH_API_URL') or DEFAULT_BASE_URL).rstrip('/')
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})
        self.timeout = timeout

    def _call(self, method, path, payload=None):
        url = f'{self.base_url}{path}'
        response = self.session.request(method, url, json=payload, timeout=self.timeout)
        if response.ok:
            return response.json()
        try:
            body = response.json()
        except ValueError:
            body = {}
        logger.warning('%s %s failed with %s: %s', method, url, response.status_code, body)
        error_cls = ERRORS_BY_CODE.get(body.get('error')) if isinstance(body, dict) else None
        if error_cls is not None:
            extra = {k: v for k, v in body.items() if k not in ('error', 'message')}
            raise error_cls(body.get('message'), **extra)
        response.raise_for_status()
        return body

    # --- collaborator contract ---

    def fetch_landlord_requests(self, landlord_id):
        return self._call('GET', f'/landlords/{landlord_id}/requests')

    def fetch_tenant_requests(self, tenant_id):
        return self._call('GET', f'/tenants/{tenant_id}/requests')

    def create_request(self, landlord_id, tenant_id):
        return self._call('POST', '/requests', {'landlord_id': landlord_id, 'tenant_id': tenant_id})

    def update_request_status(self, request_id, new_status):
        return self._call('PUT', f'/requests/{request_id}', {'status': new_status})

    # --- policy helpers ---

    def landlord_eligibility(self, landlord_id, tenant_id=None, now=None):
        return evaluate_eligibility(self.fetch_landlord_requests(landlord_id),
                                    target_tenant_id=tenant_id, now=now)

    def send_request(self, landlord_id, tenant_id, now=None):
        """
        Pre-checks eligibility locally to save a round trip, then asks the
        backend, which may still refuse (e.g. another tab got there first).
        """
        verdict = self.landlord_eligibility(landlord_id, tenant_id, now=now)
        if verdict['blocked_reason'] == BLOCKED_DUPLICATE:
            raise DuplicateRequest()
        if not verdict['can_send']:
            next_at = verdict['next_available_at']
            raise LimitExceeded(next_available_at=next_at.isoformat() if next_at else None,
                                active_pending_count=verdict['active_pending_count'])
        return self.create_request(landlord_id, tenant_id)

    def tenant_activity(self, tenant_id, now=None):
        tenant = self.get_tenant(tenant_id)
        return evaluate_activity(self.fetch_tenant_requests(tenant_id), tenant.get('is_active', True), now=now)

    # --- directory ---

    def health(self):
        return self._call('GET', '/health')

    def register_landlord(self, name, whatsapp, address=''):
        return self._call('POST', '/landlords', {'name': name, 'whatsapp': whatsapp, 'address': address})

    def get_landlord(self, landlord_id):
        return self._call('GET', f'/landlords/{landlord_id}')

    def update_landlord(self, landlord_id, **fields):
        return self._call('PUT', f'/landlords/{landlord_id}', fields)

    def update_landlord_address(self, landlord_id, address):
        return self._call('PUT', f'/landlords/{landlord_id}/address', {'address': address})

    def landlord_tenants(self, landlord_id):
        return self._call('GET', f'/landlords/{landlord_id}/tenants')

    def register_tenant(self, name, mobile, area='', cast=None, total_family_members=None):
        return self._call('POST', '/tenants', {
            'name': name, 'mobile': mobile, 'area': area,
            'cast': cast, 'total_family_members': total_family_members,
        })

    def get_tenant(self, tenant_id):
        return self._call('GET', f'/tenants/{tenant_id}')

    def update_tenant(self, tenant_id, **fields):
        return self._call('PUT', f'/tenants/{tenant_id}', fields)

    def set_tenant_active(self, tenant_id, is_active):
        return self._call('PUT', f'/tenants/{tenant_id}/active', {'is_active': is_active})

    def available_rooms(self):
        return self._call('GET', '/rooms/available')['count']

    def search_user(self, number):
        digits = ''.join(ch for ch in str(number) if ch.isdigit())
        if len(digits) != 10:
            return {'found': False}
        return self._call('GET', f'/search/{digits}')

    # --- admin ---

    def admin_stats(self):
        return self._call('GET', '/admin/stats')

    def all_users(self):
        return self._call('GET', '/admin/users')

    def delete_user(self, role, user_id):
        return self._call('DELETE', f'/admin/users/{role}/{user_id}')

    def transactions(self):
        return self._call('GET', '/admin/transactions')
