"""
Static phrase tables.

``MESSAGE_PHRASES`` backs the phrase-table backend, a stand-in for a real
translation service that knows the stock messages of a typical application
language file. ``COMMENT_PHRASES`` holds the boilerplate found in the header
comments of such files; it is applied in order as a literal find/replace list.
"""
from typing import Dict, List, Mapping, Optional, Tuple

from langfile_translator.languages import base_language

MESSAGE_PHRASES: Dict[str, Dict[str, str]] = {
    "sr": {
        "These credentials do not match our records.": "Ovi podaci se ne podudaraju sa našim zapisima.",
        "The provided password is incorrect.": "Navedena lozinka nije tačna.",
        "Too many login attempts. Please try again in :seconds seconds.":
            "Previše pokušaja prijave. Pokušajte ponovo za :seconds sekundi.",
        "Welcome to our application!": "Dobrodošli u našu aplikaciju!",
        "Hello, :name!": "Zdravo, :name!",
        "User Profile": "Korisnički profil",
        "Manage your profile information": "Upravljajte informacijama o svom profilu",
        "Save Changes": "Sačuvaj promene",
        "Cancel": "Otkaži",
        "Delete": "Obriši",
        "Operation completed successfully!": "Operacija uspešno završena!",
        "An error occurred. Please try again.": "Došlo je do greške. Molimo pokušajte ponovo.",
        "Warning: This action cannot be undone.": "Upozorenje: Ova radnja se ne može poništiti.",
    },
    "es": {
        "These credentials do not match our records.": "Estas credenciales no coinciden con nuestros registros.",
        "The provided password is incorrect.": "La contraseña proporcionada es incorrecta.",
        "Too many login attempts. Please try again in :seconds seconds.":
            "Demasiados intentos de inicio de sesión. Inténtelo de nuevo en :seconds segundos.",
        "Welcome to our application!": "¡Bienvenido a nuestra aplicación!",
        "Hello, :name!": "¡Hola, :name!",
        "User Profile": "Perfil de usuario",
        "Manage your profile information": "Administra tu información de perfil",
        "Save Changes": "Guardar cambios",
        "Cancel": "Cancelar",
        "Delete": "Eliminar",
        "Operation completed successfully!": "¡Operación completada con éxito!",
        "An error occurred. Please try again.": "Se produjo un error. Por favor, inténtelo de nuevo.",
        "Warning: This action cannot be undone.": "Advertencia: Esta acción no se puede deshacer.",
    },
    "fr": {
        "These credentials do not match our records.": "Ces identifiants ne correspondent pas à nos enregistrements.",
        "The provided password is incorrect.": "Le mot de passe fourni est incorrect.",
        "Too many login attempts. Please try again in :seconds seconds.":
            "Trop de tentatives de connexion. Veuillez réessayer dans :seconds secondes.",
        "Welcome to our application!": "Bienvenue dans notre application !",
        "Hello, :name!": "Bonjour, :name !",
        "User Profile": "Profil utilisateur",
        "Manage your profile information": "Gérez les informations de votre profil",
        "Save Changes": "Enregistrer les modifications",
        "Cancel": "Annuler",
        "Delete": "Supprimer",
        "Operation completed successfully!": "Opération terminée avec succès !",
        "An error occurred. Please try again.": "Une erreur est survenue. Veuillez réessayer.",
        "Warning: This action cannot be undone.": "Avertissement : Cette action ne peut pas être annulée.",
    },
    "de": {
        "These credentials do not match our records.":
            "Diese Anmeldedaten stimmen nicht mit unseren Aufzeichnungen überein.",
        "The provided password is incorrect.": "Das angegebene Passwort ist falsch.",
        "Too many login attempts. Please try again in :seconds seconds.":
            "Zu viele Anmeldeversuche. Bitte versuchen Sie es in :seconds Sekunden erneut.",
        "Welcome to our application!": "Willkommen in unserer Anwendung!",
        "Hello, :name!": "Hallo, :name!",
        "User Profile": "Benutzerprofil",
        "Manage your profile information": "Verwalten Sie Ihre Profilinformationen",
        "Save Changes": "Änderungen speichern",
        "Cancel": "Abbrechen",
        "Delete": "Löschen",
        "Operation completed successfully!": "Vorgang erfolgreich abgeschlossen!",
        "An error occurred. Please try again.": "Ein Fehler ist aufgetreten. Bitte versuchen Sie es erneut.",
        "Warning: This action cannot be undone.": "Warnung: Diese Aktion kann nicht rückgängig gemacht werden.",
    },
}

COMMENT_PHRASES: Dict[str, List[Tuple[str, str]]] = {
    "sr": [
        ("Authentication Language Lines", "Linije jezika za autentifikaciju"),
        ("The following language lines are used during authentication",
         "Sledeće linije jezika se koriste tokom autentifikacije"),
        ("messages that we need to display to the user", "poruke koje treba da prikažemo korisniku"),
        ("You are free to modify", "Možete ih slobodno modifikovati"),
        ("these language lines according to your application's requirements", "prema zahtevima vaše aplikacije"),
    ],
    "es": [
        ("Authentication Language Lines", "Líneas de idioma de autenticación"),
        ("The following language lines are used during authentication",
         "Las siguientes líneas de idioma se utilizan durante la autenticación"),
        ("messages that we need to display to the user", "mensajes que necesitamos mostrar al usuario"),
        ("You are free to modify", "Puede modificar libremente"),
        ("these language lines according to your application's requirements",
         "estas líneas de idioma según los requisitos de su aplicación"),
    ],
    "fr": [
        ("Authentication Language Lines", "Lignes de langue d'authentification"),
        ("The following language lines are used during authentication",
         "Les lignes de langue suivantes sont utilisées lors de l'authentification"),
        ("messages that we need to display to the user", "messages que nous devons afficher à l'utilisateur"),
        ("You are free to modify", "Vous êtes libre de modifier"),
        ("these language lines according to your application's requirements",
         "ces lignes de langue selon les besoins de votre application"),
    ],
    "de": [
        ("Authentication Language Lines", "Authentifizierungs-Sprachzeilen"),
        ("The following language lines are used during authentication",
         "Die folgenden Sprachzeilen werden bei der Authentifizierung verwendet"),
        ("messages that we need to display to the user", "Meldungen, die wir dem Benutzer anzeigen müssen"),
        ("You are free to modify", "Sie können"),
        ("these language lines according to your application's requirements",
         "diese Sprachzeilen nach den Anforderungen Ihrer Anwendung anpassen"),
    ],
}


def message_phrases_for(
        target_lang: str,
        phrases: Optional[Mapping[str, Mapping[str, str]]] = None
) -> Mapping[str, str]:
    """Phrases for the base language of ``target_lang``, from ``phrases`` or the stock table."""
    phrases = MESSAGE_PHRASES if phrases is None else phrases
    return phrases.get(base_language(target_lang), {})


def comment_phrases_for(target_lang: str) -> List[Tuple[str, str]]:
    return COMMENT_PHRASES.get(base_language(target_lang), [])
