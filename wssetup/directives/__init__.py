from .base import Directive, HostContext, InstallError
from .binaries import Bin
from .files import BashRC, Directory
from .groups import NewGroup, NewGroupMember
from .packages import AptPackage, SnapPackage
from .scripts import Command, Script
from .settings import GitConf, Gsettings

DIRECTIVE_TYPES = (
    SnapPackage,
    AptPackage,
    Directory,
    Script,
    NewGroup,
    NewGroupMember,
    GitConf,
    BashRC,
    Bin,
    Gsettings,
    Command,
)

__all__ = [
    "Directive",
    "HostContext",
    "InstallError",
    "DIRECTIVE_TYPES",
    "SnapPackage",
    "AptPackage",
    "Directory",
    "Script",
    "NewGroup",
    "NewGroupMember",
    "GitConf",
    "BashRC",
    "Bin",
    "Gsettings",
    "Command",
]
