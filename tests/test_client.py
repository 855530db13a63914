"""Tests for CCUClient operations."""

import pytest

from core.client import CCUClient
from core.exceptions import DecodeError, HTTPStatusError, RecordNotFoundError, ValidationError
from payloads import (
    BASE_URL,
    DEVICE_LIST_XML,
    PROGRAM_LIST_XML,
    RESULT_CHANGED_XML,
    STATE_LIST_XML,
    SYSVAR_LIST_XML,
    TOKEN,
)

API = f'{BASE_URL}/addons/xmlapi'


class TestConstruction:
    """Tests for building clients."""

    def test_from_config(self, session):
        client = CCUClient.from_config(
            {'base_url': 'https://10.0.0.2/', 'token': 'abc', 'timeout': 12.0, 'verify_tls': True},
            session=session,
        )

        assert client.base_url == 'https://10.0.0.2'
        assert client.transport.timeout == 12.0
        assert session.verify is True

    def test_passed_in_session_keeps_ca_bundle(self, session):
        session.verify = '/etc/ssl/certs/ccu-ca.pem'

        CCUClient(BASE_URL, TOKEN, session=session)

        assert session.verify == '/etc/ssl/certs/ccu-ca.pem'

    def test_context_manager_closes_session(self, session):
        with CCUClient(BASE_URL, TOKEN, session=session) as client:
            assert client.base_url == BASE_URL
        session.close.assert_called_once()


class TestDevices:
    """Tests for device operations."""

    def test_version(self, client, session, make_response, last_request):
        session.get.return_value = make_response(b'<version>2.3</version>')

        assert client.get_version() == '2.3'
        assert last_request() == (f'{API}/version.cgi', {'sid': TOKEN})

    def test_device_list_defaults_send_only_sid(self, client, session, make_response, last_request):
        session.get.return_value = make_response(DEVICE_LIST_XML)

        devices = client.get_device_list()

        assert len(devices) == 2
        assert last_request() == (f'{API}/devicelist.cgi', {'sid': TOKEN})

    def test_device_list_filters(self, client, session, make_response, last_request):
        session.get.return_value = make_response(DEVICE_LIST_XML)

        client.get_device_list(['1234', '2345'], show_internal=True, show_remote=True)

        _, params = last_request()
        assert params == {'sid': TOKEN, 'device_id': '1234,2345', 'show_internal': '1', 'show_remote': '1'}

    def test_get_device(self, client, session, make_response, last_request):
        session.get.return_value = make_response(DEVICE_LIST_XML)

        device = client.get_device('2345')

        assert device.name == 'Window Kitchen'
        assert last_request()[1]['device_id'] == '2345'

    def test_get_device_not_found(self, client, session, make_response):
        session.get.return_value = make_response(b'<deviceList/>')

        with pytest.raises(RecordNotFoundError):
            client.get_device('9999')

    def test_device_types(self, client, session, make_response, last_request):
        session.get.return_value = make_response(
            b'<deviceTypeList><deviceType name="HM-LC-Sw1-FM" id="HM-LC-Sw1-FM"/></deviceTypeList>')

        types = client.get_device_types()

        assert types[0].name == 'HM-LC-Sw1-FM'
        assert last_request()[0] == f'{API}/devicetypelist.cgi'

    def test_wrong_document_is_decode_error(self, client, session, make_response):
        session.get.return_value = make_response(STATE_LIST_XML)

        with pytest.raises(DecodeError):
            client.get_device_list()

    def test_http_error_propagates(self, client, session, make_response):
        session.get.return_value = make_response(b'', status_code=401)

        with pytest.raises(HTTPStatusError):
            client.get_device_list()


class TestStates:
    """Tests for state operations."""

    def test_state_list_filtered_locally(self, client, session, make_response, last_request):
        session.get.return_value = make_response(STATE_LIST_XML)

        devices = client.get_state_list('2345', show_internal=True)

        assert [d.ise_id for d in devices] == ['2345']
        _, params = last_request()
        assert params == {'sid': TOKEN, 'show_internal': '1'}
        assert 'device_id' not in params

    def test_state_list_unknown_device_is_empty(self, client, session, make_response):
        session.get.return_value = make_response(STATE_LIST_XML)
        assert client.get_state_list('9999') == []

    def test_state_list_unfiltered(self, client, session, make_response):
        session.get.return_value = make_response(STATE_LIST_XML)
        assert len(client.get_state_list()) == 2

    def test_state_joins_ids(self, client, session, make_response, last_request):
        session.get.return_value = make_response(STATE_LIST_XML)

        client.get_state(channel_ids=['1240', '2350'], datapoint_ids=['1245'])

        _, params = last_request()
        assert params == {'sid': TOKEN, 'channel_id': '1240,2350', 'datapoint_id': '1245'}

    def test_get_datapoint(self, client, session, make_response, last_request):
        session.get.return_value = make_response(STATE_LIST_XML)

        datapoint = client.get_datapoint('1246')

        assert datapoint.type == 'WORKING'
        assert last_request()[1]['datapoint_id'] == '1246'

    def test_get_datapoint_not_found(self, client, session, make_response):
        session.get.return_value = make_response(b'<state/>')

        with pytest.raises(RecordNotFoundError):
            client.get_datapoint('1')

    def test_change_state(self, client, session, make_response, last_request):
        session.get.return_value = make_response(RESULT_CHANGED_XML)

        result = client.change_state(['1245', '1246'], ['0.20', 'true'])

        assert len(result.entries_named('changed')) == 2
        assert last_request() == (f'{API}/statechange.cgi',
                                  {'sid': TOKEN, 'ise_id': '1245,1246', 'new_value': '0.20,true'})

    def test_change_state_mismatch_sends_nothing(self, client, session):
        with pytest.raises(ValidationError, match='same length'):
            client.change_state(['1245', '1246'], ['0.20'])
        session.get.assert_not_called()


class TestPrograms:
    """Tests for program operations."""

    def test_program_list(self, client, session, make_response):
        session.get.return_value = make_response(PROGRAM_LIST_XML)
        assert [p.name for p in client.get_program_list()] == ['Morning', 'Holiday']

    def test_latin1_body_normalised(self, client, session, make_response):
        """Latin-1 bytes from older firmware are converted before decoding."""
        body = ('<?xml version="1.0" encoding="ISO-8859-1"?>'
                '<programList><program id="1400" name="Rolläden schließen"/></programList>')
        session.get.return_value = make_response(body.encode('iso-8859-1'))

        programs = client.get_program_list()

        assert programs[0].name == 'Rolläden schließen'

    def test_run_program(self, client, session, make_response, last_request):
        session.get.return_value = make_response(b'<result><started program_id="1234"/></result>')

        result = client.run_program('1234')

        assert result.entries[0].tag == 'started'
        assert last_request()[1] == {'sid': TOKEN, 'program_id': '1234'}

    def test_run_program_cond_check(self, client, session, make_response, last_request):
        session.get.return_value = make_response(b'<result/>')

        client.run_program('1234', cond_check=True)

        assert last_request()[1]['cond_check'] == '1'

    def test_program_actions_true_false(self, client, session, make_response, last_request):
        session.get.return_value = make_response(b'<result/>')

        client.change_program_actions('1234', active=False, visible=True)

        assert last_request() == (f'{API}/programactions.cgi',
                                  {'sid': TOKEN, 'program_id': '1234', 'active': 'false', 'visible': 'true'})

    def test_program_actions_unset_omitted(self, client, session, make_response, last_request):
        session.get.return_value = make_response(b'<result/>')

        client.change_program_actions('1234', active=True)

        assert last_request()[1] == {'sid': TOKEN, 'program_id': '1234', 'active': 'true'}


class TestLocationsAndVariables:
    """Tests for rooms, functions and system variables."""

    def test_room_list(self, client, session, make_response):
        session.get.return_value = make_response(
            b'<roomList><room name="Kitchen" ise_id="1230"><channel ise_id="2350"/></room></roomList>')

        rooms = client.get_room_list()

        assert rooms[0].name == 'Kitchen'
        assert rooms[0].channels[0].ise_id == '2350'

    def test_function_list(self, client, session, make_response, last_request):
        session.get.return_value = make_response(
            b'<functionList><function name="Light" ise_id="1215"/></functionList>')

        assert client.get_function_list()[0].name == 'Light'
        assert last_request()[0] == f'{API}/functionlist.cgi'

    def test_sysvar_list_text_flag(self, client, session, make_response, last_request):
        session.get.return_value = make_response(SYSVAR_LIST_XML)

        client.get_system_variable_list()
        assert last_request()[1]['text'] == 'false'

        client.get_system_variable_list(show_text=True)
        assert last_request()[1]['text'] == 'true'

    def test_get_system_variable(self, client, session, make_response, last_request):
        session.get.return_value = make_response(SYSVAR_LIST_XML)

        variable = client.get_system_variable('950', show_text=True)

        assert variable.name == 'Presence'
        assert last_request() == (f'{API}/sysvar.cgi', {'sid': TOKEN, 'ise_id': '950', 'text': 'true'})

    def test_get_system_variable_not_found(self, client, session, make_response):
        session.get.return_value = make_response(b'<systemVariables></systemVariables>')

        with pytest.raises(RecordNotFoundError, match='system variable not found'):
            client.get_system_variable('1')


class TestTokensAndMasterValues:
    """Tests for token and MASTER paramset operations."""

    def test_register_token(self, client, session, make_response, last_request):
        session.get.return_value = make_response(b'<tokenRegister>new-token</tokenRegister>')

        result = client.register_token('home assistant')

        assert result.text == 'new-token'
        assert last_request() == (f'{API}/tokenregister.cgi', {'sid': TOKEN, 'desc': 'home assistant'})

    def test_revoke_token_sends_target_as_sid(self, client, session, make_response, last_request):
        session.get.return_value = make_response(b'<tokenRevoke>ok</tokenRevoke>')

        client.revoke_token('old-token')

        assert last_request() == (f'{API}/tokenrevoke.cgi', {'sid': 'old-token'})

    def test_master_values(self, client, session, make_response, last_request):
        session.get.return_value = make_response(
            b'<mastervalue><device ise_id="4000"><mastervalue name="BOOST_TIME_PERIOD" value="5"/>'
            b'</device></mastervalue>')

        devices = client.get_master_values(['4000'], ['BOOST_TIME_PERIOD'])

        assert devices[0].master_values[0].value == '5'
        assert last_request()[1] == {'sid': TOKEN, 'device_id': '4000', 'requested_names': 'BOOST_TIME_PERIOD'}

    def test_change_master_value(self, client, session, make_response, last_request):
        session.get.return_value = make_response(b'<result/>')

        client.change_master_value(['4000', '4000'], ['BOOST_TIME_PERIOD', 'TEMPERATURE_OFFSET'], ['5', '1.5'])

        assert last_request() == (f'{API}/mastervaluechange.cgi', {
            'sid': TOKEN,
            'device_id': '4000,4000',
            'name': 'BOOST_TIME_PERIOD,TEMPERATURE_OFFSET',
            'value': '5,1.5',
        })

    def test_change_master_value_mismatch(self, client, session):
        with pytest.raises(ValidationError):
            client.change_master_value(['4000'], ['A', 'B'], ['1', '2'])
        session.get.assert_not_called()
