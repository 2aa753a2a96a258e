"""Tests for serial port discovery."""

from unittest.mock import MagicMock, patch

from idfcli.ports import detect_default_port, list_serial_ports, resolve_port


def _port(device, description, hwid):
    p = MagicMock()
    p.device = device
    p.description = description
    p.hwid = hwid
    return p


class TestListSerialPorts:
    @patch("idfcli.ports.comports")
    def test_list_ports(self, mock_comports):
        mock_comports.return_value = [
            _port("/dev/ttyUSB0", "CP2102 USB to UART Bridge", "USB VID:PID=10C4:EA60"),
            _port("/dev/ttyS0", "ttyS0", "n/a"),
        ]
        result = list_serial_ports()
        assert len(result) == 2
        assert result[0].device == "/dev/ttyUSB0"
        assert result[1].hwid == "n/a"

    @patch("idfcli.ports.comports", return_value=[])
    def test_empty(self, mock_comports):
        assert list_serial_ports() == []


class TestDetectDefaultPort:
    @patch("idfcli.ports.comports")
    def test_picks_first_usb(self, mock_comports):
        mock_comports.return_value = [
            _port("/dev/ttyS0", "ttyS0", "n/a"),
            _port("/dev/ttyACM0", "USB JTAG/serial debug unit", "USB VID:PID=303A:1001"),
        ]
        assert detect_default_port() == "/dev/ttyACM0"

    @patch("idfcli.ports.comports")
    def test_no_usb(self, mock_comports):
        mock_comports.return_value = [_port("/dev/ttyS0", "ttyS0", "n/a")]
        assert detect_default_port() is None


class TestResolvePort:
    def test_cli_wins(self, monkeypatch):
        monkeypatch.setenv("ESPPORT", "/dev/ttyUSB1")
        assert resolve_port("COM3") == "COM3"

    @patch("idfcli.ports.detect_default_port", return_value="/dev/ttyUSB9")
    def test_espport_env(self, mock_detect, monkeypatch):
        monkeypatch.setenv("ESPPORT", "/dev/ttyUSB1")
        assert resolve_port(None) == "/dev/ttyUSB1"
        mock_detect.assert_not_called()

    @patch("idfcli.ports.detect_default_port", return_value="/dev/ttyUSB9")
    def test_detected(self, mock_detect, monkeypatch):
        monkeypatch.delenv("ESPPORT", raising=False)
        assert resolve_port(None) == "/dev/ttyUSB9"

    @patch("idfcli.ports.detect_default_port", return_value=None)
    def test_nothing_found(self, mock_detect, monkeypatch):
        monkeypatch.delenv("ESPPORT", raising=False)
        assert resolve_port(None) is None
