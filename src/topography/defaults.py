"""Built-in feature catalog."""

from __future__ import annotations

from topography.models import ModuleFeature

ANDROID_TEST = ModuleFeature(
    name="androidTest",
    explanation=(
        "The `androidTest()` feature was requested but no sources were found at "
        "`src/androidTest/**`"
    ),
    advice="Remove `foundry.android.features.androidTest` from your build file",
    removal_patterns=frozenset({r"\bandroidTest\(\)"}),
    matching_sources_dir="src/androidTest",
)

ROBOLECTRIC = ModuleFeature(
    name="robolectric",
    explanation=(
        "The `robolectric()` feature was requested but no sources were found at "
        "`src/test/**`"
    ),
    advice="Remove `foundry.android.features.robolectric` from your build file",
    removal_patterns=frozenset({r"\brobolectric\(\)"}),
    matching_sources_dir="src/test",
)

COMPOSE = ModuleFeature(
    name="compose",
    explanation=(
        "The `compose()` feature (and thus compose-compiler) was requested but no "
        "`@Composable` annotations were found in sources"
    ),
    advice=(
        "Remove `foundry.features.compose` from your build file or use "
        "`foundry.features.composeRuntimeOnly()`"
    ),
    removal_patterns=frozenset({r"\bcompose\(\)"}),
    matching_text=frozenset({"@Composable", "setContent {"}),
    matching_text_file_extensions=frozenset({"kt"}),
)

DAGGER_COMPILER = ModuleFeature(
    name="dagger-compiler",
    explanation=(
        "The `mergeComponents()` feature (and thus dagger-compiler/KAPT) was "
        "requested but no corresponding Merge*/*Component annotations were found "
        "in sources"
    ),
    advice="Remove `foundry.features.dagger.mergeComponents` from your build file",
    removal_patterns=frozenset({r"\bmergeComponents\(\)"}),
    matching_text=frozenset(
        {
            "@Component",
            "@Subcomponent",
            "@MergeComponent",
            "@MergeSubcomponent",
            "@MergeModules",
            "@MergeInterfaces",
            "@ContributesSubcomponent",
        }
    ),
    matching_text_file_extensions=frozenset({"kt", "java"}),
    generated_sources_dir="build/generated/source/kapt",
    generated_sources_extensions=frozenset({"java"}),
)

DAGGER = ModuleFeature(
    name="dagger",
    explanation=(
        "The `dagger()` feature (and thus Anvil/KSP) was requested but no "
        "Dagger/Anvil annotations were found in sources"
    ),
    advice="Remove `foundry.features.dagger` from your build file",
    removal_patterns=frozenset({r"\bdagger\(\)"}),
    matching_text=DAGGER_COMPILER.matching_text
    | {
        "@Inject",
        "@AssistedInject",
        "@ContributesTo",
        "@ContributesBinding",
        "@ContributesMultibinding",
        "@Module",
        "import dagger.",
        "@CircuitInject",
        "@FeatureFlags",
        "@GuinnessApi",
        "@SlackRemotePreferences",
        "@WorkRequestIn",
    },
    matching_text_file_extensions=frozenset({"kt", "java"}),
)

MOSHI_CODEGEN = ModuleFeature(
    name="moshi-codegen",
    explanation=(
        "The `moshi(codeGen = true)` feature (and thus the moshi-ir compiler plugin) "
        "was requested but no `@JsonClass` annotations were found in sources"
    ),
    advice="Remove `foundry.features.moshi.codeGen` from your build file",
    removal_patterns=None,
    matching_text=frozenset({"@JsonClass"}),
    matching_text_file_extensions=frozenset({"kt"}),
)

CIRCUIT_INJECT = ModuleFeature(
    name="circuit-inject",
    explanation=(
        "The `circuit(codegen = true)` feature (and thus the KSP) was requested but "
        "no `@CircuitInject` annotations were found in sources"
    ),
    advice=(
        "Remove `foundry.features.circuit.codegen` from your build file or set "
        "codegen to false (i.e. `circuit(codegen = false)`)"
    ),
    removal_patterns=None,
    matching_text=frozenset({"@CircuitInject"}),
    matching_text_file_extensions=frozenset({"kt"}),
)

PARCELIZE = ModuleFeature(
    name="parcelize",
    explanation=(
        "The parcelize plugin (and thus its compiler plugin) was requested but no "
        "`@Parcelize` annotations were found in sources"
    ),
    advice="Remove the parcelize plugin from your build file",
    removal_patterns=frozenset({r"\balias\(libs\.plugins\.kotlin\.plugin\.parcelize\)"}),
    matching_text=frozenset({"@Parcelize"}),
    matching_text_file_extensions=frozenset({"kt"}),
    matching_plugin="org.jetbrains.kotlin.plugin.parcelize",
)

# No extensions: KSP and KAPT can generate anything into resources.
KSP = ModuleFeature(
    name="ksp",
    explanation=(
        "The KSP plugin was requested but no generated files were found in "
        "`build/generated/ksp`"
    ),
    advice="Remove the KSP plugin (or whatever Foundry feature is requesting it)",
    removal_patterns=frozenset({r"\balias\(libs\.plugins\.ksp\)", r"\bksp\([a-zA-Z.-]*\)"}),
    generated_sources_dir="build/generated/ksp",
    matching_plugin="com.google.devtools.ksp",
)

KAPT = ModuleFeature(
    name="kapt",
    explanation=(
        "The KAPT plugin was requested but no generated files were found in "
        "`build/generated/source/kapt`"
    ),
    advice="Remove the KAPT plugin (or whatever Foundry feature is requesting it)",
    removal_patterns=frozenset(
        {r"\balias\(libs\.plugins\.kotlin\.kapt\)", r"\bkapt\([a-zA-Z.-]*\)"}
    ),
    generated_sources_dir="build/generated/source/kapt",
    matching_plugin="org.jetbrains.kotlin.kapt",
)

VIEW_BINDING = ModuleFeature(
    name="viewbinding",
    explanation=(
        "Android ViewBinding was enabled but no generated viewbinding sources were "
        "found in `build/generated/data_binding_base_class_source_out`"
    ),
    advice="Remove android.buildFeatures.viewBinding from your build file",
    removal_patterns=frozenset({r"\bviewBinding = true"}),
    generated_sources_dir="build/generated/data_binding_base_class_source_out",
    generated_sources_extensions=frozenset({"java"}),
)

DEFAULT_FEATURES: tuple[ModuleFeature, ...] = (
    ANDROID_TEST,
    ROBOLECTRIC,
    COMPOSE,
    DAGGER_COMPILER,
    DAGGER,
    MOSHI_CODEGEN,
    CIRCUIT_INJECT,
    PARCELIZE,
    KSP,
    KAPT,
    VIEW_BINDING,
)


def load_default_features() -> dict[str, ModuleFeature]:
    """Return the built-in features keyed by name."""
    return {feature.name: feature for feature in DEFAULT_FEATURES}


__all__ = [
    "ANDROID_TEST",
    "CIRCUIT_INJECT",
    "COMPOSE",
    "DAGGER",
    "DAGGER_COMPILER",
    "DEFAULT_FEATURES",
    "KAPT",
    "KSP",
    "MOSHI_CODEGEN",
    "PARCELIZE",
    "ROBOLECTRIC",
    "VIEW_BINDING",
    "load_default_features",
]
