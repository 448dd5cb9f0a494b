"""
Tests for the account service gateway
"""

import pytest
from unittest.mock import AsyncMock, Mock, patch
import httpx

from minibank.accounts import Account
from minibank.errors import GatewayUnavailable
from minibank.gateway import OfflineSyncGateway, SyncGateway


LIST_PAYLOAD = {
    "list": [
        {
            "id": 1,
            "username": "alex",
            "balance": 4800,
            "operations": [
                {"id": 1, "type": "deposit", "value": 5000, "date": "2024-12-11"},
                {"id": 2, "type": "withdraw", "value": 200, "date": "2024-12-12"}
            ]
        },
        {"id": 2, "name": "kim", "balance": 0, "operations": []}
    ]
}


class TestSyncGateway:
    """Test SyncGateway against a mocked HTTP client"""
    
    def setup_method(self):
        self.gateway = SyncGateway(base_url="http://localhost:8080/", timeout=2.0)
    
    def test_initialization(self):
        assert self.gateway.base_url == "http://localhost:8080"
        assert self.gateway.timeout == 2.0
        assert self.gateway.enabled is True
    
    @pytest.mark.asyncio
    @patch('httpx.AsyncClient.get', new_callable=AsyncMock)
    async def test_fetch_accounts(self, mock_get):
        """Test a successful account list fetch"""
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.return_value = LIST_PAYLOAD
        mock_get.return_value = mock_response
        
        accounts = await self.gateway.fetch_accounts()
        
        mock_get.assert_called_once_with("http://localhost:8080/api/bank/listAccounts")
        assert [a.id for a in accounts] == [1, 2]
        assert accounts[0].name == "alex"
        assert accounts[0].operations[1].value == -200
        assert accounts[0].is_consistent
    
    @pytest.mark.asyncio
    @patch('httpx.AsyncClient.get', new_callable=AsyncMock)
    async def test_fetch_accounts_http_error(self, mock_get):
        mock_response = Mock()
        mock_response.status_code = 500
        mock_response.text = "Internal Server Error"
        mock_get.return_value = mock_response
        
        with pytest.raises(GatewayUnavailable) as exc_info:
            await self.gateway.fetch_accounts()
        
        assert exc_info.value.operation == "fetch_accounts"
    
    @pytest.mark.asyncio
    @patch('httpx.AsyncClient.get', new_callable=AsyncMock)
    async def test_fetch_accounts_connection_error(self, mock_get):
        mock_get.side_effect = httpx.ConnectError("Connection failed")
        
        with pytest.raises(GatewayUnavailable) as exc_info:
            await self.gateway.fetch_accounts()
        
        assert isinstance(exc_info.value.cause, httpx.ConnectError)
    
    @pytest.mark.asyncio
    @patch('httpx.AsyncClient.get', new_callable=AsyncMock)
    async def test_fetch_accounts_bad_payload(self, mock_get):
        """A body without a list of accounts is a gateway failure"""
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.return_value = {"accounts": []}
        mock_get.return_value = mock_response
        
        with pytest.raises(GatewayUnavailable):
            await self.gateway.fetch_accounts()
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        [],
        {"list": None},
        {"list": [1]},
        {"list": [{"id": 1, "operations": ["x"]}]},
    ])
    @patch('httpx.AsyncClient.get', new_callable=AsyncMock)
    async def test_fetch_accounts_malformed_items(self, mock_get, payload):
        """Account entries and operations that are not objects are a gateway failure"""
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.return_value = payload
        mock_get.return_value = mock_response
        
        with pytest.raises(GatewayUnavailable) as exc_info:
            await self.gateway.fetch_accounts()
        assert exc_info.value.operation == "fetch_accounts"
    
    @pytest.mark.asyncio
    @patch('httpx.AsyncClient.get', new_callable=AsyncMock)
    async def test_fetch_accounts_invalid_json(self, mock_get):
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = mock_response
        
        with pytest.raises(GatewayUnavailable):
            await self.gateway.fetch_accounts()
    
    @pytest.mark.asyncio
    async def test_disabled_gateway_does_not_fetch(self):
        gateway = SyncGateway(enabled=False)
        
        with pytest.raises(GatewayUnavailable):
            await gateway.fetch_accounts()
    
    @pytest.mark.asyncio
    async def test_gateway_without_base_url(self):
        """Without a base URL no client is opened and nothing is sent"""
        gateway = SyncGateway(base_url="")
        
        with pytest.raises(GatewayUnavailable):
            await gateway.fetch_accounts()
        await gateway.notify_transfer(1, 2, 300)
        assert await gateway.health_check() is False
        await gateway.close()
    
    @pytest.mark.asyncio
    @patch('httpx.AsyncClient.post', new_callable=AsyncMock)
    async def test_notify_transfer(self, mock_post):
        """Transfer is reported through query parameters"""
        mock_response = Mock()
        mock_response.status_code = 200
        mock_post.return_value = mock_response
        
        await self.gateway.notify_transfer(1, 2, 1000)
        
        mock_post.assert_called_once()
        call_args = mock_post.call_args
        assert call_args[0][0] == "http://localhost:8080/api/bank/transfer"
        assert call_args.kwargs["params"] == {
            "fromAccountId": 1,
            "toAccountId": 2,
            "amount": 1000
        }
        assert call_args.kwargs["headers"]["Content-Type"] == "application/json"
    
    @pytest.mark.asyncio
    @patch('httpx.AsyncClient.post', new_callable=AsyncMock)
    async def test_notify_transfer_connection_error(self, mock_post):
        mock_post.side_effect = httpx.ConnectError("Connection failed")
        
        with pytest.raises(GatewayUnavailable) as exc_info:
            await self.gateway.notify_transfer(1, 2, 1000)
        
        assert exc_info.value.operation == "notify_transfer"
    
    @pytest.mark.asyncio
    @patch('httpx.AsyncClient.post', new_callable=AsyncMock)
    async def test_notify_transfer_rejected(self, mock_post):
        mock_response = Mock()
        mock_response.status_code = 503
        mock_response.text = "Service Unavailable"
        mock_post.return_value = mock_response
        
        with pytest.raises(GatewayUnavailable):
            await self.gateway.notify_transfer(1, 2, 1000)
    
    @pytest.mark.asyncio
    @patch('httpx.AsyncClient.post', new_callable=AsyncMock)
    async def test_disabled_gateway_skips_notification(self, mock_post):
        gateway = SyncGateway(enabled=False)
        
        await gateway.notify_transfer(1, 2, 1000)
        
        mock_post.assert_not_called()
    
    @pytest.mark.asyncio
    @patch('httpx.AsyncClient.get', new_callable=AsyncMock)
    async def test_health_check(self, mock_get):
        mock_response = Mock()
        mock_response.status_code = 200
        mock_get.return_value = mock_response
        
        assert await self.gateway.health_check() is True
        
        mock_get.side_effect = httpx.ConnectError("Connection failed")
        assert await self.gateway.health_check() is False


class TestOfflineSyncGateway:
    """Test the in-process gateway"""
    
    @pytest.mark.asyncio
    async def test_has_no_http_client(self):
        gateway = OfflineSyncGateway([Account(id=3, name="sam")])
        
        assert gateway._client is None
        await gateway.close()
    
    @pytest.mark.asyncio
    async def test_returns_configured_accounts(self):
        gateway = OfflineSyncGateway([Account(id=3, name="sam")])
        
        accounts = await gateway.fetch_accounts()
        
        assert [a.id for a in accounts] == [3]
        assert await gateway.health_check() is True
    
    @pytest.mark.asyncio
    async def test_without_accounts_fetch_fails(self):
        gateway = OfflineSyncGateway()
        
        assert gateway.enabled is False
        with pytest.raises(GatewayUnavailable):
            await gateway.fetch_accounts()
    
    @pytest.mark.asyncio
    async def test_records_notifications(self):
        gateway = OfflineSyncGateway()
        
        await gateway.notify_transfer(1, 2, 300)
        
        assert gateway.notifications == [(1, 2, 300)]
    
    @pytest.mark.asyncio
    async def test_failing_notifications(self):
        gateway = OfflineSyncGateway(fail_notifications=True)
        
        with pytest.raises(GatewayUnavailable):
            await gateway.notify_transfer(1, 2, 300)
        assert gateway.notifications == []
