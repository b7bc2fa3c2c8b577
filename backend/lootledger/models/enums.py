import enum


class PlayerRole(str, enum.Enum):
    ADMIN = "ADMIN"    # Darf Drops, Items, Bosse und Finanzstatus verwalten
    MEMBER = "MEMBER"  # Sieht Drops und eigene Anteile


class ItemCategory(str, enum.Enum):
    SKILL = "Skill"
    WEAPON = "Weapon"
    ARMOR = "Armor"
    ACCESSORY = "Accessory"
    MATERIAL = "Material"
    MOUNT = "Mount"
    SPECIAL = "Special"


class DropStatus(str, enum.Enum):
    DROPPED = "DROPPED"
    NOT_DROPPED = "NOT_DROPPED"


class FinanceStatus(str, enum.Enum):
    """Finanzstatus auf Drop-Ebene, unabhängig vom paid_status der Anteile."""
    WAIT = "WAIT"          # Verkauft bzw. zu verkaufen, Auszahlung offen
    PAID = "PAID"          # Manuell als ausgezahlt markiert
    PERSONAL = "PERSONAL"  # Von einem Mitglied behalten, nie verkauft


class ShareType(str, enum.Enum):
    AUTO = "AUTO"          # Aus gleichmäßiger Aufteilung
    BUY = "BUY"            # Mitglied kauft einen festen Anteil heraus
    PERSONAL = "PERSONAL"  # Informelle Absprache


class PaidStatus(str, enum.Enum):
    WAIT = "WAIT"
    PAID = "PAID"
