"""KiXtart name tables and block keywords."""

from __future__ import annotations

from enum import Enum


def _names(text: str) -> frozenset[str]:
    return frozenset(text.lower().split())


COMMANDS: frozenset[str] = _names(
    """
    Beep Big Break Call Case CD CLS Color Cookie1 Copy Debug Del Dim Display
    Do Each Else EndFunction EndIf EndSelect Exit FlushKB For Function Get Gets
    Global Go GoSub Goto If In Loop MD Move Next Password Play Preserve
    Quit RD ReDim Return Run Select Set SetL SetM SetTime Shell Sleep Small
    Step To Until Use While
    """
)

FUNCTIONS: frozenset[str] = _names(
    """
    Abs AddKey AddPrinterConnection AddProgramGroup AddProgramItem Asc AScan At
    BackupEventLog Box CDbl Chr CInt ClearEventLog Close CompareFileTimes
    CreateObject CStr DecToHex DelKey DelPrinterConnection DelProgramGroup
    DelProgramItem DelTree DelValue Dir EnumGroup EnumIpInfo EnumKey
    EnumLocalGroup EnumValue Execute Exist ExistKey ExpandEnvironmentVars Fix
    FormatNumber FreeFileHandle GetCommandLine GetDiskSpace GetFileAttr
    GetFileSize GetFileTime GetFileVersion GetObject IIf InGroup InStr InStrRev
    Int IsDeclared Join KbHit KeyExist LCase Left Len LoadHive LoadKey LogEvent
    LogOff LTrim MemorySize MessageBox Open ReadLine ReadProfileString ReadType
    ReadValue RedirectOutput Right Rnd Round RTrim SaveKey SendKeys
    SendMessage SetAscii SetConsole SetDefaultPrinter SetFileAttr SetFocus
    SetOption SetSystemState SetTitle SetWallpaper ShowProgramGroup Shutdown
    SidToName Split SRnd SubStr Trim UBound UCase UnloadHive Val VarType
    VarTypeName WriteLine WriteProfileString WriteValue
    """
)

MACROS: frozenset[str] = _names(
    """
    Address Build Color Comment CPU CRLF CSD CurDir Date Day Domain DOS Error
    FullName HomeDir HomeDrive HomeShr HostName InWin IPAddress0 IPAddress1
    IPAddress2 IPAddress3 KiX LanRoot LDomain LDrive LM LogonMode LongHomeDir
    LServer MaxPWAge MDayNo MHz MonthNo Month MSecs OnWoW64 PID PrimaryGroup
    Priv ProductSuite ProductType PWAge RAS Result RServer ScriptDir ScriptExe
    ScriptName SError SID Site StartDir SysLang Ticks Time TsSession UserID
    UserLang WDayNo WKSTA WUserID YDayNo Year
    """
)

# Longest names first so the first hit is the longest prefix.
_MACROS_BY_LENGTH: tuple[str, ...] = tuple(sorted(MACROS, key=len, reverse=True))


def match_macro(name: str) -> str | None:
    """Return the longest macro name that *name* starts with, ignoring case."""
    folded = name.lower()
    for macro in _MACROS_BY_LENGTH:
        if folded.startswith(macro):
            return macro
    return None


class Role(Enum):
    OPEN = "open"
    CLOSE = "close"
    BOTH = "both"  # closes the previous branch and opens the next one


class BlockKeyword(Enum):
    DO = ("do", Role.OPEN)
    UNTIL = ("until", Role.CLOSE)
    FOR = ("for", Role.OPEN)
    NEXT = ("next", Role.CLOSE)
    FUNCTION = ("function", Role.OPEN)
    ENDFUNCTION = ("endfunction", Role.CLOSE)
    IF = ("if", Role.OPEN)
    ELSE = ("else", Role.BOTH)
    ENDIF = ("endif", Role.CLOSE)
    SELECT = ("select", Role.OPEN)
    CASE = ("case", Role.BOTH)
    ENDSELECT = ("endselect", Role.CLOSE)
    WHILE = ("while", Role.OPEN)
    LOOP = ("loop", Role.CLOSE)

    def __init__(self, word: str, role: Role) -> None:
        self.word = word
        self.role = role

    @property
    def opens(self) -> bool:
        return self.role is not Role.CLOSE

    @property
    def closes(self) -> bool:
        return self.role is not Role.OPEN

    @classmethod
    def lookup(cls, text: str) -> BlockKeyword | None:
        return _BY_WORD.get(text.lower())


_BY_WORD: dict[str, BlockKeyword] = {kw.word: kw for kw in BlockKeyword}

# Opener -> keywords accepted on a line that returns to the opener's column.
CLOSERS: dict[BlockKeyword, frozenset[BlockKeyword]] = {
    BlockKeyword.DO: frozenset({BlockKeyword.UNTIL}),
    BlockKeyword.FOR: frozenset({BlockKeyword.NEXT}),
    BlockKeyword.FUNCTION: frozenset({BlockKeyword.ENDFUNCTION}),
    BlockKeyword.IF: frozenset({BlockKeyword.ELSE, BlockKeyword.ENDIF}),
    BlockKeyword.SELECT: frozenset({BlockKeyword.CASE, BlockKeyword.ENDSELECT}),
    BlockKeyword.WHILE: frozenset({BlockKeyword.LOOP}),
    BlockKeyword.CASE: frozenset({BlockKeyword.CASE, BlockKeyword.ENDSELECT}),
    BlockKeyword.ELSE: frozenset({BlockKeyword.ENDIF}),
}

# Opener -> the closer that ends its block for good.
OWN_CLOSER: dict[BlockKeyword, BlockKeyword] = {
    BlockKeyword.DO: BlockKeyword.UNTIL,
    BlockKeyword.FOR: BlockKeyword.NEXT,
    BlockKeyword.FUNCTION: BlockKeyword.ENDFUNCTION,
    BlockKeyword.IF: BlockKeyword.ENDIF,
    BlockKeyword.SELECT: BlockKeyword.ENDSELECT,
    BlockKeyword.WHILE: BlockKeyword.LOOP,
}
