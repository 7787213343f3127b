"""madOS WLAN - Notification texts in English and Spanish."""

import locale
import os

TRANSLATIONS = {
    'English': {
        'connected_title': 'Connected',
        'connected_body': 'You are now connected to {ssid}.',
        'connect_failed_title': 'Connection failed',
        'connect_failed_body': 'Could not connect to {ssid}. Check the password or move closer to the access point.',
        'disconnected_title': 'Disconnected',
        'disconnected_body': 'The wireless interface {iface} was disconnected.',
        'disconnect_failed_title': 'Disconnect failed',
        'disconnect_failed_body': 'Could not disconnect {iface}: {detail}',
        'radio_on_title': 'Wi-Fi enabled',
        'radio_off_title': 'Wi-Fi disabled',
        'radio_body': 'The wireless radio was switched {state}.',
        'radio_failed_title': 'Wi-Fi switch failed',
        'radio_failed_body': 'Could not switch the wireless radio {state}: {detail}',
        'rescan_title': 'Scan requested',
        'rescan_body': 'Looking for nearby networks.',
        'rescan_failed_title': 'Scan failed',
        'rescan_failed_body': 'Could not start a new scan: {detail}',
        'tool_missing_title': 'Network tool unavailable',
        'tool_missing_body': 'Cannot run the network manager: {detail}',
        'on': 'on',
        'off': 'off',
        'unknown_error': 'unknown error',
    },
    'Español': {
        'connected_title': 'Conectado',
        'connected_body': 'Ahora estás conectado a {ssid}.',
        'connect_failed_title': 'Error de conexión',
        'connect_failed_body': 'No se pudo conectar a {ssid}. Revisa la contraseña o acércate al punto de acceso.',
        'disconnected_title': 'Desconectado',
        'disconnected_body': 'La interfaz inalámbrica {iface} se desconectó.',
        'disconnect_failed_title': 'Error al desconectar',
        'disconnect_failed_body': 'No se pudo desconectar {iface}: {detail}',
        'radio_on_title': 'Wi-Fi activado',
        'radio_off_title': 'Wi-Fi desactivado',
        'radio_body': 'La radio inalámbrica se ha {state}.',
        'radio_failed_title': 'Error al cambiar el Wi-Fi',
        'radio_failed_body': 'No se pudo cambiar la radio inalámbrica a {state}: {detail}',
        'rescan_title': 'Búsqueda solicitada',
        'rescan_body': 'Buscando redes cercanas.',
        'rescan_failed_title': 'Error de búsqueda',
        'rescan_failed_body': 'No se pudo iniciar una nueva búsqueda: {detail}',
        'tool_missing_title': 'Herramienta de red no disponible',
        'tool_missing_body': 'No se puede ejecutar el gestor de red: {detail}',
        'on': 'activado',
        'off': 'desactivado',
        'unknown_error': 'error desconocido',
    },
}


def detect_system_language(lang_code=None):
    """Detect the UI language from the system locale.

    Args:
        lang_code: Optional explicit locale code (e.g. 'es_ES.UTF-8').

    Returns:
        A key of TRANSLATIONS, 'English' when nothing matches.
    """
    if not lang_code:
        lang_code = os.environ.get('LC_MESSAGES') or os.environ.get('LANG')
    if not lang_code:
        try:
            lang_tuple = locale.getlocale(locale.LC_MESSAGES)
            if lang_tuple and lang_tuple[0]:
                lang_code = lang_tuple[0]
        except (AttributeError, ValueError):
            pass

    if not lang_code:
        return 'English'

    lang_prefix = lang_code.split('_')[0].split('.')[0].lower()
    lang_map = {
        'en': 'English',
        'es': 'Español',
    }
    return lang_map.get(lang_prefix, 'English')


def get_text(key, language='English', **kwargs):
    """Retrieve a translated string, formatted with *kwargs*.

    Falls back to English, then to the key itself.
    """
    lang_dict = TRANSLATIONS.get(language, TRANSLATIONS['English'])
    text = lang_dict.get(key, TRANSLATIONS['English'].get(key, key))
    return text.format(**kwargs) if kwargs else text
