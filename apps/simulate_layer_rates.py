#!/usr/bin/env python
"""
Simulate the mean achievable layer rates of a NOMA downlink with random
channels and random precoders and plot them as a function of the SNR.

Usage: simulate_layer_rates.py [config_file]

If the config file does not exist it is created with the default values.
"""

# xxxxxxxxxx Add the parent folder to the python path. xxxxxxxxxxxxxxxxxxxx
import sys
import os
try:
    parent_dir = os.path.split(os.path.abspath(os.path.dirname(__file__)))[0]
    sys.path.append(parent_dir)
except NameError:
    sys.path.append('../')
# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx

from matplotlib import pyplot as plt

from pynoma.simulations import load_scenario_file, simulate_layer_rates

if __name__ == '__main__':
    if len(sys.argv) > 1:
        config_file_name = sys.argv[1]
    else:
        config_file_name = 'layer_rates_config.txt'

    params = load_scenario_file(config_file_name, save_parsed_file=True)
    results = simulate_layer_rates(params)

    print("SNR (dB): {0}".format(results.SNR))
    print("Mean sum rate: {0}".format(results.mean_sum_rate))
    print("Discarded trials: {0}".format(results.num_infeasible))

    # Can only plot if we simulated for more then one value of SNR
    if results.SNR.size > 1:
        fig, ax = plt.subplots()
        ax.plot(results.SNR, results.mean_sum_rate, '-k*', label='Sum rate')
        ax.fill_between(results.SNR,
                        results.sum_rate_conf_interval[:, 0],
                        results.sum_rate_conf_interval[:, 1],
                        color='k', alpha=0.2)
        for layer in range(results.mean_layer_rate.shape[1]):
            ax.plot(results.SNR, results.mean_layer_rate[:, layer], '--o',
                    label='Layer {0}'.format(layer))

        ax.set_xlabel('SNR (dB)')
        ax.set_ylabel('Rate (bits/s/Hz)')
        ax.set_title('Mean achievable layer rates with {0} users and {1} '
                     'transmit antennas'.format(params['K'], params['Nt']))
        ax.legend()
        ax.grid(True, which='both', axis='both')
        plt.show()
