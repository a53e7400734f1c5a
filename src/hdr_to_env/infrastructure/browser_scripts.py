"""JavaScript evaluated inside the sandbox page.

``INSTALL_CONVERTER`` runs once after the engine is injected. It builds the
single shared canvas, engine, scene and camera and exposes
``window.hdrToEnv.convert(dataUrl, resolution)``, which performs one
HDR to ENV conversion and always disposes its texture.
"""

from __future__ import annotations

INSTALL_CONVERTER = """
async () => {
  if (typeof BABYLON === "undefined") {
    throw new Error("Babylon.js engine did not load");
  }

  const canvas = document.createElement("canvas");
  canvas.id = "renderCanvas";
  document.body.appendChild(canvas);

  const engine = new BABYLON.Engine(canvas, true, {
    preserveDrawingBuffer: true,
    stencil: true,
    premultipliedAlpha: false,
  });
  const scene = new BABYLON.Scene(engine);
  const camera = new BABYLON.FreeCamera(
    "camera1",
    new BABYLON.Vector3(0, 5, -10),
    scene
  );
  camera.setTarget(BABYLON.Vector3.Zero());

  const waitForSceneReady = () =>
    new Promise((resolve) => scene.executeWhenReady(() => resolve(null)));

  const readBlobAsBinaryString = (blob) =>
    new Promise((resolve, reject) => {
      const reader = new FileReader();
      reader.onload = () => resolve(reader.result);
      reader.onerror = () =>
        reject(new Error("Error occurred while reading binary string"));
      reader.readAsBinaryString(blob);
    });

  window.hdrToEnv = {
    async convert(dataUrl, resolution) {
      const texture = new BABYLON.HDRCubeTexture(
        dataUrl,
        scene,
        resolution,
        false,
        true,
        false,
        true
      );
      try {
        await waitForSceneReady();
        const buffer =
          await BABYLON.EnvironmentTextureTools.CreateEnvTextureAsync(texture);
        const blob = new Blob([buffer], { type: "octet/stream" });
        return await readBlobAsBinaryString(blob);
      } finally {
        texture.dispose();
      }
    },
  };

  await waitForSceneReady();
  return BABYLON.Engine.Version;
}
"""

CONVERT_ONE = """
([dataUrl, resolution]) => window.hdrToEnv.convert(dataUrl, resolution)
"""
