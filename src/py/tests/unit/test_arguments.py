"""Tests for cordova_run.arguments and cordova_run.metadata modules."""

from cordova_run.arguments import BuildOptions, filter_arguments_for_cordova, generate_build_options
from cordova_run.executor import NodeExecutor
from cordova_run.metadata import CommandOption, OptionGroup, run_metadata
from cordova_run.options import RunOptions
from cordova_run.serve import AngularServeRunner, ViteServeRunner

# =====================================================
# Metadata
# =====================================================


def test_option_dest_is_derived_from_name() -> None:
    assert CommandOption(name="buildConfig").dest == "build_config"
    assert CommandOption(name="livereload-port").dest == "livereload_port"
    assert CommandOption(name="cordova-target").dest == "cordova_target"
    assert CommandOption(name="x").dest == "x"


def test_run_metadata_forwards_cordova_options_in_order() -> None:
    names = [opt.name for opt in run_metadata().options_in(OptionGroup.CORDOVA)]

    assert names == ["list", "debug", "release", "device", "emulator", "cordova-target", "buildConfig"]


def test_with_options_overrides_in_place_and_appends() -> None:
    metadata = run_metadata()
    overridden = CommandOption(name="debug", description="Debug build", groups=frozenset())

    specialized = metadata.with_options(overridden, CommandOption(name="mode", kind=str))

    names = [opt.name for opt in specialized.options]
    assert names.index("debug") == [opt.name for opt in metadata.options].index("debug")
    assert names[-1] == "mode"
    assert specialized.option("debug") is overridden
    assert metadata.option("mode") is None


def test_emulate_metadata_name() -> None:
    metadata = run_metadata("emulate")

    assert metadata.name == "emulate"
    assert "emulator" in metadata.description


# =====================================================
# Toolchain arguments
# =====================================================


def test_filter_arguments_platform_and_flags() -> None:
    options = RunOptions(platform="android", device=True, release=True, livereload=True, port=8200)

    args = filter_arguments_for_cordova(run_metadata(), options)

    assert args == ["run", "android", "--release", "--device"]


def test_filter_arguments_is_deterministic() -> None:
    options = RunOptions(platform="ios", debug=True, emulator=True, build_config="build.json")
    metadata = run_metadata()

    assert filter_arguments_for_cordova(metadata, options) == filter_arguments_for_cordova(metadata, options)


def test_filter_arguments_renames_target_option() -> None:
    options = RunOptions(platform="android", cordova_target="Pixel_7_API_34")

    args = filter_arguments_for_cordova(run_metadata(), options)

    assert args == ["run", "android", "--target", "Pixel_7_API_34"]


def test_filter_arguments_build_config() -> None:
    options = RunOptions(platform="android", build_config="build.json")

    args = filter_arguments_for_cordova(run_metadata(), options)

    assert args == ["run", "android", "--buildConfig", "build.json"]


def test_filter_arguments_passthrough_comes_last() -> None:
    options = RunOptions(
        platform="ios",
        device=True,
        verbose=True,
        passthrough=["--developmentTeam=ABCD", "--codeSignIdentity=iPhone Developer"],
    )

    args = filter_arguments_for_cordova(run_metadata(), options)

    assert args == [
        "run",
        "ios",
        "--device",
        "--verbose",
        "--developmentTeam=ABCD",
        "--codeSignIdentity=iPhone Developer",
    ]


def test_filter_arguments_skips_serve_options() -> None:
    options = RunOptions(platform="android", build=False, proxy=False, noproxy=True, x=True, address="127.0.0.1")

    args = filter_arguments_for_cordova(run_metadata(), options)

    assert args == ["run", "android"]


def test_filter_arguments_list_without_platform() -> None:
    options = RunOptions(list=True, emulator=True)

    args = filter_arguments_for_cordova(run_metadata("emulate"), options)

    assert args == ["emulate", "--list", "--emulator"]


def test_filter_arguments_ignores_runner_options() -> None:
    metadata = ViteServeRunner(NodeExecutor()).specialize_command_metadata(run_metadata())
    options = RunOptions(platform="android", extra={"mode": "staging"})

    assert filter_arguments_for_cordova(metadata, options) == ["run", "android"]


# =====================================================
# Build options
# =====================================================


def test_generate_build_options_copies_serve_settings() -> None:
    options = RunOptions(platform="android", address="127.0.0.1", port=8200, livereload_port=35730, proxy=False)

    build_options = generate_build_options(run_metadata(), options)

    assert build_options == BuildOptions(
        platform="android",
        address="127.0.0.1",
        port=8200,
        livereload_port=35730,
        proxy=False,
    )
    assert build_options.engine == "cordova"
    assert build_options.external_address_required
    assert not build_options.open_browser


def test_generate_build_options_collects_runner_options() -> None:
    metadata = AngularServeRunner(NodeExecutor()).specialize_command_metadata(run_metadata())
    options = RunOptions(platform="ios", release=True, extra={"prod": True})

    build_options = generate_build_options(metadata, options)

    assert build_options.extra == {"prod": True, "configuration": None}
    assert "release" not in build_options.extra
