"""File templates for new ESP-IDF projects."""

from __future__ import annotations


def render_project_files(name: str) -> dict[str, str]:
    """Return {relative path: content} for a hello-world project."""
    return {
        "CMakeLists.txt": _root_cmake(name),
        "main/CMakeLists.txt": _main_cmake(),
        "main/main.c": _main_c(),
        "README.md": _readme(name),
        ".gitignore": _gitignore(),
    }


def _root_cmake(name: str) -> str:
    return f"""# For more information about build system see
# https://docs.espressif.com/projects/esp-idf/en/latest/api-guides/build-system.html
# The following five lines of boilerplate have to be in your project's
# CMakeLists.txt.

cmake_minimum_required(VERSION 3.16)

include($ENV{{IDF_PATH}}/tools/cmake/project.cmake)
project({name})
"""


def _main_cmake() -> str:
    return """idf_component_register(SRCS "main.c"
                    INCLUDE_DIRS ".")
"""


def _main_c() -> str:
    return r"""#include <stdio.h>
#include <inttypes.h>
#include "sdkconfig.h"
#include "freertos/FreeRTOS.h"
#include "freertos/task.h"
#include "esp_chip_info.h"
#include "esp_flash.h"
#include "esp_system.h"

void app_main(void)
{
    printf("Hello world!\n");

    esp_chip_info_t chip_info;
    uint32_t flash_size;
    esp_chip_info(&chip_info);
    printf("This is %s chip with %d CPU core(s), %s%s%s%s, ",
           CONFIG_IDF_TARGET,
           chip_info.cores,
           (chip_info.features & CHIP_FEATURE_WIFI_BGN) ? "WiFi/" : "",
           (chip_info.features & CHIP_FEATURE_BT) ? "BT" : "",
           (chip_info.features & CHIP_FEATURE_BLE) ? "BLE" : "",
           (chip_info.features & CHIP_FEATURE_IEEE802154) ? ", 802.15.4 (Zigbee/Thread)" : "");

    unsigned major_rev = chip_info.revision / 100;
    unsigned minor_rev = chip_info.revision % 100;
    printf("silicon revision v%d.%d, ", major_rev, minor_rev);
    if (esp_flash_get_size(NULL, &flash_size) != ESP_OK) {
        printf("Get flash size failed");
        return;
    }

    printf("%" PRIu32 "MB %s flash\n", flash_size / (uint32_t)(1024 * 1024),
           (chip_info.features & CHIP_FEATURE_EMB_FLASH) ? "embedded" : "external");

    printf("Minimum free heap size: %" PRIu32 " bytes\n", esp_get_minimum_free_heap_size());

    for (int i = 10; i >= 0; i--) {
        printf("Restarting in %d seconds...\n", i);
        vTaskDelay(1000 / portTICK_PERIOD_MS);
    }
    printf("Restarting now.\n");
    fflush(stdout);
    esp_restart();
}
"""


def _readme(name: str) -> str:
    return f"""# {name}

This is the {name} ESP-IDF project.

## Build and Flash

Build the project:
```
idfcli build
```

Flash the project:
```
idfcli flash
```

Monitor the output:
```
idfcli monitor
```

Or all at once:
```
idfcli build flash monitor
```
"""


def _gitignore() -> str:
    return """build/
managed_components/
dependencies.lock
*.tmp
"""
