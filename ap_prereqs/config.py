from __future__ import annotations

import dataclasses
import getpass
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .lib.container import is_container
from .lib.toolchain import DEFAULT_TIMEOUT, ToolchainArtifact

ENV_VARS = (
    "AP_DOCKER_BUILD",
    "DO_PYTHON_VENV_ENV",
    "DO_AP_STM_ENV",
    "DO_ARM_LINUX",
    "SKIP_AP_COMPLETION_ENV",
    "SKIP_AP_GIT_CHECK",
)

BASE_PKGS = [
    "@development-tools", "ccache", "git", "wget", "valgrind", "screen",
    "gcc-c++", "gawk", "make", "rsync",
]

SITL_PKGS = [
    "python3", "python3-devel", "python3-pip", "python3-setuptools", "python3-wheel",
    "python3-numpy", "python3-pyparsing", "python3-psutil",
    "libxml2-devel", "libxslt-devel",
    "xterm", "xorg-x11-fonts-misc", "SFML-devel",
    "freetype-devel", "libpng-devel", "SDL2-devel", "SDL2_image-devel",
    "SDL2_mixer-devel", "SDL2_ttf-devel", "portmidi-devel",
]

PYTHON_BOOTSTRAP_PKGS = [["pip", "packaging", "setuptools", "wheel"], ["attrdict3"]]

PYTHON_PKGS = [
    "future", "lxml", "pymavlink", "MAVProxy", "pexpect", "argparse", "pyparsing",
    "geocoder", "pyserial", "empy==3.3.4", "ptyprocess", "dronecan",
    "flake8", "junitparser", "matplotlib", "scipy", "opencv-python", "pygame",
    "intelhex", "psutil", "pyyaml", "packaging",
]

CONFLICTING_PKGS = ["ModemManager", "brltty"]

CCACHE_DIR = "/usr/lib64/ccache"
CCACHE_COMPILERS = [
    "arm-none-eabi-g++", "arm-none-eabi-gcc",
    "arm-linux-gnueabihf-g++", "arm-linux-gnueabihf-gcc",
]
CCACHE_SETTINGS = {
    "sloppiness": "file_macro,locale,time_macros",
    "ignore_options": "--specs=nano.specs --specs=nosys.specs",
}

# name -> (url, archive filename, sha256 or None, top-level directory)
TOOLCHAINS: Dict[str, Tuple[str, str, Optional[str], str]] = {
    "arm_none_eabi": (
        "https://firmware.ardupilot.org/Tools/STM32-tools/gcc-arm-none-eabi-10-2020-q4-major-x86_64-linux.tar.bz2",
        "gcc-arm-none-eabi-10-2020-q4-major-x86_64-linux.tar.bz2",
        "21134caa478bbf5352e239fbc6e2da3038f8d2207e089efc96c3b55f1edcd618",
        "gcc-arm-none-eabi-10-2020-q4-major",
    ),
    "arm_linux": (
        "https://releases.linaro.org/components/toolchain/binaries/7.5-2019.12/arm-linux-gnueabihf/"
        "gcc-linaro-7.5.0-2019.12-x86_64_arm-linux-gnueabihf.tar.xz",
        "gcc-linaro-7.5.0-2019.12-x86_64_arm-linux-gnueabihf.tar.xz",
        None,
        "gcc-linaro-7.5.0-2019.12-x86_64_arm-linux-gnueabihf",
    ),
}

AUTOTEST_REL = "Tools/autotest"
COMPLETION_REL = "Tools/completion/completion.bash"
CONTAINER_ENV_FILE = ".ardupilot_env"

_OVERRIDE_KEYS = {
    "opt_dir",
    "download_dir",
    "venv_dir",
    "base_packages",
    "sitl_packages",
    "python_packages",
    "conflicting_packages",
    "toolchains",
    "download_timeout",
    "verify_downloads",
}


@dataclass(frozen=True)
class ProvisionConfig:
    home: Path
    project_root: Path
    user: str = ""
    assume_yes: bool = False
    quiet: bool = False
    is_container: bool = False
    opt_dir: Path = Path("/opt")
    download_dir: Optional[Path] = None
    venv_dir: Optional[Path] = None
    base_packages: List[str] = field(default_factory=lambda: list(BASE_PKGS))
    sitl_packages: List[str] = field(default_factory=lambda: list(SITL_PKGS))
    python_bootstrap_packages: List[List[str]] = field(default_factory=lambda: [list(g) for g in PYTHON_BOOTSTRAP_PKGS])
    python_packages: List[str] = field(default_factory=lambda: list(PYTHON_PKGS))
    conflicting_packages: List[str] = field(default_factory=lambda: list(CONFLICTING_PKGS))
    ccache_dir: Path = Path(CCACHE_DIR)
    ccache_compilers: List[str] = field(default_factory=lambda: list(CCACHE_COMPILERS))
    ccache_settings: Dict[str, str] = field(default_factory=lambda: dict(CCACHE_SETTINGS))
    toolchain_sources: Dict[str, Tuple[str, str, Optional[str], str]] = field(default_factory=lambda: dict(TOOLCHAINS))
    env_overrides: Dict[str, Optional[str]] = field(default_factory=dict)
    download_timeout: float = DEFAULT_TIMEOUT
    verify_downloads: bool = True
    system_python: str = "python3"

    @property
    def venv(self) -> Path:
        return self.venv_dir or self.home / "venv-ardupilot"

    @property
    def shell_login(self) -> Path:
        if self.is_container:
            return self.home / CONTAINER_ENV_FILE
        return self.home / ".profile"

    @property
    def bashrc(self) -> Path:
        return self.home / ".bashrc"

    @property
    def autotest_dir(self) -> Path:
        return self.project_root / AUTOTEST_REL

    @property
    def completion_script(self) -> Path:
        return self.project_root / COMPLETION_REL

    def env(self, name: str) -> Optional[str]:
        return self.env_overrides.get(name)

    def skip(self, name: str) -> bool:
        return (self.env(name) or "").strip() == "1"

    def toolchain(self, name: str) -> ToolchainArtifact:
        url, filename, sha256, marker = self.toolchain_sources[name]
        return ToolchainArtifact(
            name=name,
            source_url=url,
            local_filename=filename,
            expected_checksum=sha256,
            install_dir=self.opt_dir,
            marker_name=marker,
            download_dir=self.download_dir,
        )


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(str(path))
    if path.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("provisioning config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the provisioning config") from e

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")
    return raw


def _str_list(raw: Dict[str, Any], key: str) -> List[str]:
    value = raw[key]
    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list")
    return [str(v).strip() for v in value if str(v).strip()]


def _apply_overrides(cfg: ProvisionConfig, raw: Dict[str, Any]) -> ProvisionConfig:
    unknown = set(raw) - _OVERRIDE_KEYS
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    changes: Dict[str, Any] = {}
    for key in ("opt_dir", "download_dir", "venv_dir"):
        if raw.get(key):
            changes[key] = Path(str(raw[key])).expanduser()
    for key in ("base_packages", "sitl_packages", "python_packages", "conflicting_packages"):
        if key in raw:
            changes[key] = _str_list(raw, key)
    if "download_timeout" in raw:
        changes["download_timeout"] = float(raw["download_timeout"])
    if "verify_downloads" in raw:
        changes["verify_downloads"] = bool(raw["verify_downloads"])

    toolchains = raw.get("toolchains") or {}
    if not isinstance(toolchains, dict):
        raise ValueError("toolchains must be a mapping")
    if toolchains:
        sources = dict(cfg.toolchain_sources)
        for name, entry in toolchains.items():
            if name not in sources:
                raise ValueError(f"Unknown toolchain {name!r} (expected one of {', '.join(sources)})")
            entry = entry or {}
            url, filename, sha256, marker = sources[name]
            sha256 = entry.get("sha256", sha256)
            sources[name] = (
                str(entry.get("url", url)),
                str(entry.get("filename", filename)),
                None if sha256 is None else str(sha256),
                str(entry.get("marker", marker)),
            )
        changes["toolchain_sources"] = sources

    return dataclasses.replace(cfg, **changes)


def load_config(
    *,
    assume_yes: bool = False,
    quiet: bool = False,
    project_root: Optional[str] = None,
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> ProvisionConfig:
    """Resolve flags, environment and the optional YAML file into one config."""

    env = os.environ if environ is None else environ
    home_dir = Path(home) if home is not None else Path.home()

    cfg = ProvisionConfig(
        home=home_dir,
        project_root=Path(project_root or os.getcwd()).resolve(),
        user=env.get("USER") or getpass.getuser(),
        assume_yes=assume_yes,
        quiet=quiet,
        is_container=is_container(env),
        download_dir=home_dir / ".cache" / "ardupilot-prereqs" / "downloads",
        env_overrides={name: env.get(name) for name in ENV_VARS},
    )

    if config_path:
        cfg = _apply_overrides(cfg, _load_yaml(Path(config_path).expanduser()))
    return cfg
