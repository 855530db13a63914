"""CCUClient class for the HomeMatic CCU XML-API.

This module contains the client class that exposes every XML-API endpoint
as a typed method. Each method validates its arguments, builds the query
parameters, performs exactly one request and returns decoded records.
Nothing is cached between calls.
"""

import requests

from core.decoder import decode
from core.encoding import convert_to_utf8
from core.exceptions import RecordNotFoundError
from core.transport import DEFAULT_TIMEOUT, Transport
from models.records import (
    DataPoint,
    Device,
    DeviceType,
    Function,
    Program,
    ResultEnvelope,
    Room,
    SystemVariable,
)
from models.types import Settings
from models.utils import check_parallel, flag_bool, flag_one, join_ids


class CCUClient:
    """Client for the XML-API add-on of a HomeMatic CCU."""

    def __init__(self, base_url: str, token: str, session: requests.Session | None = None,
                 timeout: float = DEFAULT_TIMEOUT, verify_tls: bool | None = None):
        """Initialise CCUClient.

        Args:
            base_url: CCU address including scheme, e.g. ``https://192.168.1.100``
            token: XML-API security token
            session: Optional requests session (shared HTTP transport)
            timeout: Client-wide request timeout in seconds
            verify_tls: Verify the CCU TLS certificate (None keeps the setting of a
                passed-in session, otherwise off)
        """
        self.transport = Transport(base_url, token, session=session,
                                   timeout=timeout, verify_tls=verify_tls)

    @classmethod
    def from_config(cls, settings: Settings, session: requests.Session | None = None) -> 'CCUClient':
        """Build a client from settings resolved by core.config."""
        return cls(
            settings['base_url'],
            settings['token'],
            session=session,
            timeout=settings.get('timeout', DEFAULT_TIMEOUT),
            verify_tls=settings.get('verify_tls'),
        )

    @property
    def base_url(self) -> str:
        return self.transport.base_url

    def close(self):
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _request(self, endpoint: str, schema: str, params: dict[str, str | None] | None = None):
        """Fetch an endpoint and decode it against a schema.

        Parameters whose value is None are left out of the query.
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}
        body = self.transport.get(endpoint, query)
        return decode(convert_to_utf8(body), schema)

    # ===== Version =====

    def get_version(self) -> str:
        """Get the XML-API version string."""
        return self._request('version', 'version')

    # ===== Devices =====

    def get_device_list(self, device_ids: list[str] | None = None, show_internal: bool = False,
                        show_remote: bool = False) -> list[Device]:
        """Get devices with their channels (no values).

        Args:
            device_ids: Only return these devices (all devices if empty)
            show_internal: Include internal channels
            show_remote: Include remote (virtual) channels
        """
        return self._request('devicelist', 'device_list', {
            'device_id': join_ids(device_ids) if device_ids else None,
            'show_internal': flag_one(show_internal),
            'show_remote': flag_one(show_remote),
        })

    def get_device(self, ise_id: str) -> Device:
        """Get a single device by ise_id.

        Raises:
            RecordNotFoundError: If the CCU does not know the device
        """
        for device in self.get_device_list([ise_id]):
            if device.ise_id == ise_id:
                return device
        raise RecordNotFoundError(f"device {ise_id} not found")

    def get_device_types(self) -> list[DeviceType]:
        """Get all device types known to the CCU."""
        return self._request('devicetypelist', 'device_type_list')

    # ===== States =====

    def get_state_list(self, device_id: str | None = None, show_internal: bool = False,
                       show_remote: bool = False) -> list[Device]:
        """Get all devices with current data point values.

        statelist.cgi cannot filter by device, so the full list is fetched
        and filtered here. An unknown device_id gives an empty list.
        """
        devices = self._request('statelist', 'state_list', {
            'show_internal': flag_one(show_internal),
            'show_remote': flag_one(show_remote),
        })
        if device_id:
            return [device for device in devices if device.ise_id == device_id]
        return devices

    def get_state(self, device_ids: list[str] | None = None, channel_ids: list[str] | None = None,
                  datapoint_ids: list[str] | None = None) -> list[Device]:
        """Get current values of specific devices, channels or data points."""
        return self._request('state', 'state', {
            'device_id': join_ids(device_ids) if device_ids else None,
            'channel_id': join_ids(channel_ids) if channel_ids else None,
            'datapoint_id': join_ids(datapoint_ids) if datapoint_ids else None,
        })

    def get_datapoint(self, datapoint_id: str) -> DataPoint:
        """Get a single data point by ise_id.

        Raises:
            RecordNotFoundError: If the data point is not in the response
        """
        for device in self.get_state(datapoint_ids=[datapoint_id]):
            for _, datapoint in device.iter_datapoints():
                if datapoint.ise_id == datapoint_id:
                    return datapoint
        raise RecordNotFoundError(f"datapoint {datapoint_id} not found")

    def change_state(self, ise_ids: list[str], new_values: list[str]) -> ResultEnvelope:
        """Set new values on one or more data points.

        Args:
            ise_ids: Data point (or channel) ise_ids
            new_values: One value per id, in the same order

        Raises:
            ValidationError: If the lists differ in length (nothing is sent)
        """
        check_parallel(ise_ids=ise_ids, new_values=new_values)
        return self._request('statechange', 'result', {
            'ise_id': join_ids(ise_ids),
            'new_value': join_ids(new_values),
        })

    # ===== Programs =====

    def get_program_list(self) -> list[Program]:
        """Get all programs."""
        return self._request('programlist', 'program_list')

    def run_program(self, program_id: str, cond_check: bool = False) -> ResultEnvelope:
        """Start a program.

        Args:
            program_id: Program id
            cond_check: Evaluate the program's conditions instead of running
                its then-branch unconditionally
        """
        return self._request('runprogram', 'result', {
            'program_id': program_id,
            'cond_check': flag_one(cond_check),
        })

    def change_program_actions(self, program_id: str, active: bool | None = None,
                               visible: bool | None = None) -> ResultEnvelope:
        """Change a program's active and/or visible flag (None leaves it unchanged)."""
        return self._request('programactions', 'result', {
            'program_id': program_id,
            'active': flag_bool(active) if active is not None else None,
            'visible': flag_bool(visible) if visible is not None else None,
        })

    # ===== Rooms and functions =====

    def get_room_list(self) -> list[Room]:
        """Get all rooms including their channels."""
        return self._request('roomlist', 'room_list')

    def get_function_list(self) -> list[Function]:
        """Get all functions including their channels."""
        return self._request('functionlist', 'function_list')

    # ===== System variables =====

    def get_system_variable_list(self, show_text: bool = False) -> list[SystemVariable]:
        """Get all system variables.

        Args:
            show_text: Ask the CCU to include value_text for each variable
        """
        return self._request('sysvarlist', 'sysvar_list', {'text': flag_bool(show_text)})

    def get_system_variable(self, ise_id: str, show_text: bool = False) -> SystemVariable:
        """Get a single system variable.

        Raises:
            RecordNotFoundError: If the response contains no variable
        """
        variables = self._request('sysvar', 'sysvar_list', {
            'ise_id': ise_id,
            'text': flag_bool(show_text),
        })
        if not variables:
            raise RecordNotFoundError("system variable not found")
        return variables[0]

    # ===== Tokens =====

    def register_token(self, description: str) -> ResultEnvelope:
        """Register a new security access token."""
        return self._request('tokenregister', 'result', {'desc': description})

    def revoke_token(self, token_id: str) -> ResultEnvelope:
        """Revoke a security access token.

        The token to revoke is sent as ``sid``, replacing the client's own
        token for this request.
        """
        return self._request('tokenrevoke', 'result', {'sid': token_id})

    # ===== Master values =====

    def get_master_values(self, device_ids: list[str] | None = None,
                          requested_names: list[str] | None = None) -> list[Device]:
        """Get devices with their MASTER paramset values."""
        return self._request('mastervalue', 'master_value', {
            'device_id': join_ids(device_ids) if device_ids else None,
            'requested_names': join_ids(requested_names) if requested_names else None,
        })

    def change_master_value(self, device_ids: list[str], names: list[str],
                            values: list[str]) -> ResultEnvelope:
        """Set MASTER paramset values; the three lists are matched by position.

        Raises:
            ValidationError: If the lists differ in length (nothing is sent)
        """
        check_parallel(device_ids=device_ids, names=names, values=values)
        return self._request('mastervaluechange', 'result', {
            'device_id': join_ids(device_ids),
            'name': join_ids(names),
            'value': join_ids(values),
        })
